"""REST paths used by the client package."""

# ── Auth ────────────────────────────────────────────────────────────
LOGIN = "/api/auth/login"
LOGOUT = "/api/auth/logout"
REGISTER = "/api/auth/register"
FORGOT_PASSWORD = "/api/auth/forgot-password"
RESET_PASSWORD = "/api/auth/reset-password"
WHOAMI = "/api/auth/whoami"
UPDATE_PROFILE = "/api/auth/update-profile"


def update_user_by_id(user_id: int) -> str:
    return f"/api/auth/{user_id}"


# ── Admin collections ───────────────────────────────────────────────
ADMIN_USERS = "/api/admin/users"
ADMIN_OFFERS = "/api/admin/offers"
ADMIN_HALLS = "/api/admin/halls"
ADMIN_MOVIES = "/api/admin/movies"
ADMIN_SHOWTIMES = "/api/admin/showtimes"


def by_id(collection: str, obj_id: int) -> str:
    return f"{collection}/{obj_id}"


# ── Public ──────────────────────────────────────────────────────────
MOVIES = "/api/movies"


def movie_showtimes(movie_id: int) -> str:
    return f"{MOVIES}/{movie_id}/showtimes"


KHALTI_INITIATE = "/api/payment/khalti/initiate"
KHALTI_LOOKUP = "/api/payment/khalti/lookup"

# ── Booking ─────────────────────────────────────────────────────────
BOOKING_CITIES = "/api/booking/cities"
BOOKING_HALLS = "/api/booking/halls"
BOOKING_SHOWTIMES = "/api/booking/showtimes"
BOOKING_HOLDS = "/api/booking/holds"
BOOKING_CONFIRM = "/api/booking/confirm"


def showtime_seats(showtime_id: int) -> str:
    return f"{BOOKING_SHOWTIMES}/{showtime_id}/seats"
