"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from models.etl_run import ETLStatus

# ============================================================================
# ETL Run Schemas
# ============================================================================

class ETLRunSummary(BaseModel):
    run_id: str
    source: str
    status: ETLStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    records_extracted: int = 0
    records_skipped: int = 0
    records_failed: int = 0
    records_loaded: int = 0
    error_message: Optional[str] = None

    @validator("run_id", pre=True)
    def stringify_run_id(cls, v):
        """UUID columns come back as uuid.UUID"""
        return str(v)

    class Config:
        from_attributes = True
        use_enum_values = True


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    database_connected: bool
    total_players: Optional[int] = None
    last_run: Optional[ETLRunSummary] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    # Declared last so the validator sees the fields above
    status: str = Field("healthy", description="Overall system status: healthy, degraded, unhealthy")

    @validator("status", pre=True, always=True)
    def determine_status(cls, v, values):
        """Determine overall health status"""
        if not values.get("database_connected", False):
            return "unhealthy"

        if values.get("total_players") is None:
            return "degraded"  # Reachable but the player table is missing

        last_run = values.get("last_run")
        if last_run is not None and last_run.status == ETLStatus.FAILED:
            return "degraded"

        return "healthy"

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "total_players": 1034512,
                "last_run": {
                    "run_id": "550e8400-e29b-41d4-a716-446655440000",
                    "source": "players_list_xml_foa.xml",
                    "status": "success",
                    "started_at": "2024-01-15T10:00:00Z",
                    "completed_at": "2024-01-15T10:04:12Z",
                    "duration_seconds": 252.3,
                    "records_extracted": 1412345,
                    "records_skipped": 377833,
                    "records_failed": 0,
                    "records_loaded": 1034512
                }
            }
        }


# ============================================================================
# Statistics Schemas
# ============================================================================

class StatsResponse(BaseModel):
    """Statistics response model"""
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    request_id: Optional[str] = None

    total_players: int
    total_runs: int

    # Recent ETL runs
    recent_runs: List[ETLRunSummary] = Field(default_factory=list)

    # Time-based stats
    last_etl_success: Optional[datetime]
    last_etl_failure: Optional[datetime]
    avg_etl_duration_seconds: Optional[float]


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Resource not found.",
                "detail": "No player with FIDE ID 1234",
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
