"""
Tests for Holiday Routes (/api/holidays endpoints).

- Endpoints: list (by year), check-business-day, countries
- Calendars are rule-based, so there is no data to mock
"""
import pytest


# ==========================================
# HOLIDAY LIST TESTS
# ==========================================

class TestHolidayList:

    @pytest.mark.integration
    def test_list_holidays_2024(self, client):
        response = client.get("/api/holidays?year=2024")
        assert response.status_code == 200

        data = response.json()
        assert data["country_code"] == "ZA"
        assert data["year"] == 2024
        assert data["count"] == 13
        assert data["holidays"][0] == {
            "holiday_date": "2024-01-01",
            "name": "New Year's Day",
            "is_observed": False,
        }

    @pytest.mark.integration
    def test_observed_monday_listed(self, client):
        response = client.get("/api/holidays?year=2023")
        assert response.status_code == 200

        observed = [h for h in response.json()["holidays"] if h["is_observed"]]
        assert [h["holiday_date"] for h in observed] == ["2023-01-02", "2023-09-25"]
        assert response.json()["count"] == 14

    @pytest.mark.integration
    def test_easter_holidays_listed(self, client):
        response = client.get("/api/holidays?year=2025")

        by_date = {h["holiday_date"]: h["name"] for h in response.json()["holidays"]}
        assert by_date["2025-04-18"] == "Good Friday"
        assert by_date["2025-04-19"] == "Family Day"

    @pytest.mark.unit
    def test_year_required(self, client):
        response = client.get("/api/holidays")
        assert response.status_code == 422

    @pytest.mark.unit
    def test_year_out_of_range(self, client):
        response = client.get("/api/holidays?year=1800")
        assert response.status_code == 422

    @pytest.mark.unit
    def test_unknown_country(self, client):
        response = client.get("/api/holidays?year=2024&country_code=XX")
        assert response.status_code == 400

        data = response.json()
        assert data["error"] == "UnknownCalendarError"
        assert data["details"]["country_code"] == "XX"


# ==========================================
# BUSINESS DAY CHECK TESTS
# ==========================================

class TestCheckBusinessDay:

    @pytest.mark.integration
    def test_plain_weekday(self, client):
        response = client.get("/api/holidays/check-business-day?check_date=2024-03-20")
        assert response.status_code == 200

        data = response.json()
        assert data["day_of_week"] == "Wednesday"
        assert data["is_business_day"] == True
        assert data["is_holiday"] == False
        assert data["holiday_name"] is None

    @pytest.mark.integration
    def test_holiday(self, client):
        response = client.get("/api/holidays/check-business-day?check_date=2024-03-21")

        data = response.json()
        assert data["is_business_day"] == False
        assert data["is_weekend"] == False
        assert data["holiday_name"] == "Human Rights Day"

    @pytest.mark.integration
    def test_sunday_holiday(self, client):
        """A Sunday holiday is both weekend and holiday."""
        response = client.get("/api/holidays/check-business-day?check_date=2024-06-16")

        data = response.json()
        assert data["is_weekend"] == True
        assert data["is_holiday"] == True
        assert data["is_business_day"] == False

    @pytest.mark.integration
    def test_observed_monday(self, client):
        response = client.get("/api/holidays/check-business-day?check_date=2024-06-17")

        data = response.json()
        assert data["day_of_week"] == "Monday"
        assert data["is_business_day"] == False
        assert data["holiday_name"] == "Youth Day (observed)"

    @pytest.mark.unit
    def test_invalid_date(self, client):
        response = client.get("/api/holidays/check-business-day?check_date=not-a-date")
        assert response.status_code == 422


# ==========================================
# COUNTRIES TESTS
# ==========================================

class TestCountries:

    @pytest.mark.unit
    def test_countries(self, client):
        response = client.get("/api/holidays/countries")
        assert response.status_code == 200
        assert response.json() == {"countries": ["ZA"], "default": "ZA"}

    @pytest.mark.unit
    def test_registered_calendar_listed(self, client, calendar_registry):
        calendar_registry.register_calendar(calendar_registry.HolidayCalendar("TT", "Test Land"))

        response = client.get("/api/holidays/countries")
        assert response.json()["countries"] == ["TT", "ZA"]
