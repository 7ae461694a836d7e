"""API routers."""

from hostel.api.routes import assignments, complaints, payments, residents, rooms, stats

__all__ = ["assignments", "complaints", "payments", "residents", "rooms", "stats"]
