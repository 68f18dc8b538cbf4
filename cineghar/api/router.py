"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from cineghar.api.endpoints import (admin_users, auth, booking, halls, health,
                                    movies, offers, payment, showtimes)

api_router = APIRouter()

# Auth (register, login, profile, password reset)
api_router.include_router(auth.router)

# Admin collections
api_router.include_router(admin_users.router)
api_router.include_router(offers.router)
api_router.include_router(halls.router)
api_router.include_router(movies.router)
api_router.include_router(showtimes.router)

# Public catalogue, booking, payments, health
api_router.include_router(movies.public_router)
api_router.include_router(booking.router)
api_router.include_router(payment.router)
api_router.include_router(health.router)
