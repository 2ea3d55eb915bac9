"""
Holiday Calendar API Routes for Fibre Tracker.

Read-only view of the holiday calendars used in business day
calculations. Calendars are rule-based, so there is nothing to create
or delete here.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from fibretrack.core.config import settings
from fibretrack.models.schemas import (
    BusinessDayCheckResponse,
    HolidayListResponse,
    HolidayOut,
)
from fibretrack.services.holidays import available_calendars, get_calendar, is_weekend


router = APIRouter(prefix="/api/holidays", tags=["Holidays"])


@router.get(
    "",
    summary="List Holidays",
    description="Get the holidays of one calendar year",
    response_model=HolidayListResponse
)
async def list_holidays(
    year: int = Query(..., ge=1900, le=2200, description="Calendar year"),
    country_code: Optional[str] = Query(None, description="Country code (default from settings)")
) -> HolidayListResponse:
    """List holidays for a year, including observed Mondays."""
    calendar = get_calendar(country_code)

    holidays = [
        HolidayOut(
            holiday_date=entry.holiday_date,
            name=entry.name,
            is_observed=entry.is_observed
        )
        for entry in calendar.holiday_entries(year)
    ]

    return HolidayListResponse(
        country_code=calendar.country_code,
        year=year,
        holidays=holidays,
        count=len(holidays)
    )


@router.get(
    "/check-business-day",
    summary="Check Business Day",
    description="Check if a date is a business day",
    response_model=BusinessDayCheckResponse
)
async def check_business_day(
    check_date: date = Query(..., description="Date to check"),
    country_code: Optional[str] = Query(None, description="Country code (default from settings)")
) -> BusinessDayCheckResponse:
    """Check if a specific date is a business day."""
    calendar = get_calendar(country_code)
    holiday_name = calendar.holiday_name(check_date)

    return BusinessDayCheckResponse(
        check_date=check_date,
        day_of_week=check_date.strftime("%A"),
        is_business_day=calendar.is_business_day(check_date),
        is_weekend=is_weekend(check_date),
        is_holiday=holiday_name is not None,
        holiday_name=holiday_name
    )


@router.get(
    "/countries",
    summary="Get Country Codes",
    description="Get list of country codes that have a holiday calendar"
)
async def get_holiday_countries() -> dict:
    """Registered calendars and the default one."""
    return {
        "countries": available_calendars(),
        "default": settings.holiday_country_code.upper()
    }
