"""API v1 router configuration."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin_analytics,
    admin_verifications,
    appointments,
    articles,
    auth,
    consultations,
    doctors,
    health,
    notifications,
    orders,
    payments,
    prescriptions,
    records,
    reviews,
    users,
    webhooks,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(consultations.router, prefix="/consultations", tags=["Consultations"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(prescriptions.router, prefix="/prescriptions", tags=["Prescriptions"])
api_router.include_router(records.router, prefix="/records", tags=["Medical Records"])
api_router.include_router(orders.router, prefix="/orders", tags=["Orders"])
api_router.include_router(articles.router, prefix="/articles", tags=["Articles"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(
    admin_verifications.router, prefix="/admin/verifications", tags=["Admin"]
)
api_router.include_router(admin_analytics.router, prefix="/admin/analytics", tags=["Admin"])
