"""Database models."""

from app.models.appointments import appointments
from app.models.audit_logs import audit_logs
from app.models.base import metadata
from app.models.clinics import clinics
from app.models.consultations import consultations, prescriptions
from app.models.content import articles, reviews
from app.models.doctors import doctor_availability, doctors
from app.models.medical_records import medical_records
from app.models.notifications import notifications
from app.models.orders import order_items, orders
from app.models.patients import patients
from app.models.payments import payments
from app.models.users import users

__all__ = [
    "appointments",
    "articles",
    "audit_logs",
    "clinics",
    "consultations",
    "doctor_availability",
    "doctors",
    "medical_records",
    "metadata",
    "notifications",
    "order_items",
    "orders",
    "patients",
    "payments",
    "prescriptions",
    "reviews",
    "users",
]
