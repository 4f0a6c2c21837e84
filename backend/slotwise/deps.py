from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .database import get_db
from .core.security import decode_token
from .models.user import User
from .repository import SqlAvailabilityStore
from .services.availability import AvailabilityService
from .services.booking import BookingService
from .services.google_calendar import GoogleCalendarGateway

# tokens are issued by the login flow, outside this service
oauth2 = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_settings(request: Request):
    return request.app.state.settings


def get_current_user(request: Request, token: str | None = Depends(oauth2),
                     db: Session = Depends(get_db)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    data = decode_token(token, get_settings(request).SECRET_KEY)
    if not data or "sub" not in data:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user = db.query(User).filter(User.email == data["sub"]).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user


def get_store(db: Session = Depends(get_db)) -> SqlAvailabilityStore:
    return SqlAvailabilityStore(db)


def get_calendar(request: Request, store: SqlAvailabilityStore = Depends(get_store)):
    s = get_settings(request)
    return GoogleCalendarGateway(
        store,
        http=request.app.state.http,
        client_id=s.GOOGLE_CLIENT_ID,
        client_secret=s.GOOGLE_CLIENT_SECRET,
        calendar_id=s.GOOGLE_CALENDAR_ID,
        timeout=s.CALENDAR_TIMEOUT_SEC,
    )


def get_availability_service(request: Request,
                             store: SqlAvailabilityStore = Depends(get_store),
                             calendar=Depends(get_calendar)) -> AvailabilityService:
    s = get_settings(request)
    return AvailabilityService(
        store,
        calendar,
        default_timezone=s.TIMEZONE,
        buffer_minutes=s.SLOT_BUFFER_MIN,
        step_minutes=s.SLOT_STEP_MIN,
    )


def get_booking_service(store: SqlAvailabilityStore = Depends(get_store),
                        calendar=Depends(get_calendar),
                        availability: AvailabilityService = Depends(get_availability_service)) -> BookingService:
    return BookingService(store, calendar, availability)
