from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class EventCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1, max_length=40)
    time: str = Field(..., min_length=1, max_length=40)
    venue: Optional[str] = Field(default=None, max_length=255)
    image: Optional[str] = Field(default=None, max_length=1024)
    maxParticipants: Optional[int] = Field(default=None, gt=0)
    isActive: Optional[bool] = None
    createdBy: Optional[str] = Field(default=None, max_length=120)


class EventUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    date: Optional[str] = Field(default=None, min_length=1, max_length=40)
    time: Optional[str] = Field(default=None, min_length=1, max_length=40)
    venue: Optional[str] = Field(default=None, max_length=255)
    image: Optional[str] = Field(default=None, max_length=1024)
    maxParticipants: Optional[int] = Field(default=None, gt=0)
    isActive: Optional[bool] = None
    createdBy: Optional[str] = Field(default=None, max_length=120)


class RegistrationRequest(BaseModel):
    registrantName: str = Field(..., min_length=1, max_length=255)
    registrantEmail: EmailStr
    registrantPhone: str = Field(..., min_length=1, max_length=80)
    registrantClass: str = Field(..., min_length=1, max_length=80)
    registrantRollNo: str = Field(..., min_length=1, max_length=80)
    registrantPRN: str = Field(..., min_length=1, max_length=80)


class StatusUpdate(BaseModel):
    # Validated by the service so a missing status gets the same "Invalid status" answer
    status: Optional[str] = None


class BadgeAward(BaseModel):
    userId: Optional[str] = None
    badgeId: Optional[str] = None
    reason: Optional[str] = None


class CheckoutRequest(BaseModel):
    plan: Optional[str] = None
    userId: Optional[str] = None


class CancelSubscriptionRequest(BaseModel):
    subscriptionId: Optional[str] = None
