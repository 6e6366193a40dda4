"""Pydantic schemas for the BFHL response envelopes."""

from typing import Any
from pydantic import BaseModel, Field


class HealthEnvelope(BaseModel):
    """Envelope returned by the health check.
    
    Attributes:
        is_success: Always True.
        official_email: Configured identity string.
    """
    
    is_success: bool = Field(default=True, description="Whether the request succeeded")
    official_email: str = Field(..., description="Identity echoed in every response")


class SuccessEnvelope(HealthEnvelope):
    """Envelope carrying the result of an operation."""
    
    data: Any = Field(..., description="Operation result")
    
    @classmethod
    def build(cls, identity: str, data: Any) -> "SuccessEnvelope":
        """Create a success envelope.
        
        Args:
            identity: Configured identity string.
            data: Operation result.
            
        Returns:
            SuccessEnvelope with data populated.
        """
        return cls(official_email=identity, data=data)


class ErrorEnvelope(BaseModel):
    """Envelope carrying a failure message.
    
    Attributes:
        is_success: Always False.
        official_email: Configured identity string.
        message: Human-readable error message.
    """
    
    is_success: bool = Field(default=False, description="Whether the request succeeded")
    official_email: str = Field(..., description="Identity echoed in every response")
    message: str = Field(..., description="Error message")
    
    @classmethod
    def build(cls, identity: str, message: str) -> "ErrorEnvelope":
        return cls(official_email=identity, message=message)
