from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    version: str
    status: str
    timestamp: str
    database: str


class PingResponse(BaseModel):
    message: str
    timestamp: str
    status: str
    server: str
