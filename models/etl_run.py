from sqlalchemy import Column, BigInteger, String, Enum, DateTime, Float, Integer, Text, Index, JSON, Uuid
from datetime import datetime
import uuid
from models.base import Base, ETLStatus

class ETLRun(Base):
    """
    Tracks metadata for each ingestion run that reached the store.

    Purpose:
    - Audit trail of feed refreshes
    - Run duration monitoring
    - Skipped/failed player accounting

    Runs that fail before the store is touched (unreadable or malformed
    feed) leave no row here.
    """
    __tablename__ = "etl_runs"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    run_id = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False, index=True)

    # Feed identification
    source = Column(String(1024), nullable=False)

    # Run metadata
    status = Column(Enum(ETLStatus), default=ETLStatus.RUNNING, nullable=False, index=True)

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    records_extracted = Column(Integer, default=0)
    records_skipped = Column(Integer, default=0)
    records_failed = Column(Integer, default=0)
    records_loaded = Column(Integer, default=0)

    # Error tracking
    error_message = Column(Text, nullable=True)
    error_details = Column(JSON, nullable=True)

    # Indexes
    __table_args__ = (
        Index("idx_etl_run_status", "status", "started_at"),
    )
