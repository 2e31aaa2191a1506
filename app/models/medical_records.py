"""Medical record metadata model.

File bytes live in external object storage; only their location and
descriptive metadata are kept here.
"""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

medical_records = Table(
    "medical_records",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column(
        "patient_id",
        String(36),
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("record_type", String(30), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    # Storage location
    Column("file_url", String(1000)),
    Column("file_path", String(500)),
    Column("mime_type", String(100)),
    Column("file_size", Integer),
    Column("record_date", Date),
    # Doctor ids granted explicit access
    Column("shared_with", JSON),
    Column("metadata", JSON),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    CheckConstraint(
        "record_type IN ('lab_result', 'prescription', 'imaging', 'vaccination', "
        "'medical_history', 'other')",
        name="record_type",
    ),
    Index("ix_medical_records_patient_type", "patient_id", "record_type"),
)
