"""
Calendar and repair order assignment tests.

An order is either unassigned (no technician, no date) or assigned (both).
"""
from datetime import date, datetime

import pytest

from voltmanager.services import repair_order_service, schedule_service, technician_service
from voltmanager.validation import NotFoundError, ValidationError


class TestWeek:
    def test_week_starts_on_monday(self):
        days = schedule_service.get_week_days(date(2024, 1, 17))  # Wednesday
        assert days[0] == date(2024, 1, 15)
        assert days[-1] == date(2024, 1, 21)
        assert len(days) == 7

    def test_accepts_iso_string(self):
        assert schedule_service.get_week_days("2024-01-15")[0] == date(2024, 1, 15)

    def test_bad_day(self):
        with pytest.raises(ValidationError):
            schedule_service.get_week_days("next tuesday")


class TestMoveOrder:
    def test_assign_then_unassign(self, technician_t1, repair_order):
        """Drop into T1 on the 17th, then back to the unassigned column."""
        moved = schedule_service.move_order(order_id="ro-1", technician_id="T1", day="2024-01-17")

        assert moved["assigned_technician_id"] == "T1"
        assert moved["scheduled_date"] == "2024-01-17T00:00:00Z"
        cell = schedule_service.get_orders_for_technician_and_day("T1", date(2024, 1, 17))
        assert [o["id"] for o in cell] == ["ro-1"]
        assert schedule_service.get_unassigned_orders() == []
        assert schedule_service.get_orders_for_technician_and_day("T1", date(2024, 1, 18)) == []

        cleared = schedule_service.move_order(order_id="ro-1", technician_id=None)

        assert cleared["assigned_technician_id"] is None
        assert cleared["scheduled_date"] is None
        assert [o["id"] for o in schedule_service.get_unassigned_orders()] == ["ro-1"]

    def test_unknown_technician_changes_nothing(self, repair_order):
        with pytest.raises(NotFoundError):
            schedule_service.move_order(order_id="ro-1", technician_id="ghost", day="2024-01-17")

        order = repair_order_service.get_repair_order("ro-1")
        assert order["assigned_technician_id"] is None
        assert order["scheduled_date"] is None

    def test_unknown_order(self, technician_t1):
        with pytest.raises(NotFoundError):
            schedule_service.move_order(order_id="nope", technician_id="T1", day="2024-01-17")

    def test_assign_requires_day(self, technician_t1, repair_order):
        with pytest.raises(ValidationError):
            schedule_service.move_order(order_id="ro-1", technician_id="T1", day=None)

    def test_time_of_day_ignored_for_cell(self, technician_t1, repair_order):
        repair_order_service.assign_technician(
            order_id="ro-1",
            technician_id="T1",
            scheduled_date=datetime(2024, 1, 17, 15, 30),
        )
        cell = schedule_service.get_orders_for_technician_and_day("T1", "2024-01-17")
        assert [o["id"] for o in cell] == ["ro-1"]

    def test_generic_update_cannot_half_assign(self, repair_order):
        updated = repair_order_service.update_repair_order(
            order_id="ro-1",
            patch={"assigned_technician_id": "T1", "issue": "Battery swelling"},
        )
        assert updated["assigned_technician_id"] is None
        assert updated["issue"] == "Battery swelling"


class TestWeekBoard:
    def test_board_layout(self, technician_t1, repair_order):
        schedule_service.move_order(order_id="ro-1", technician_id="T1", day="2024-01-17")

        board = schedule_service.week_board("2024-01-17")

        assert board["week_start"] == "2024-01-15"
        assert len(board["days"]) == 7
        row = board["technicians"][0]
        assert row["technician"]["id"] == "T1"
        wednesday = row["days"][2]
        assert wednesday["date"] == "2024-01-17"
        assert [o["id"] for o in wednesday["orders"]] == ["ro-1"]
        assert board["unassigned"] == []


class TestTimeSpent:
    def test_records_hours(self, repair_order):
        assert schedule_service.update_time_spent(order_id="ro-1", hours=1.5)["time_spent"] == 1.5

    def test_negative_rejected(self, repair_order):
        with pytest.raises(ValidationError):
            schedule_service.update_time_spent(order_id="ro-1", hours=-1)
        assert repair_order_service.get_repair_order("ro-1")["time_spent"] == 0.0

    @pytest.mark.parametrize("hours", [float("nan"), float("inf")])
    def test_non_finite_rejected(self, repair_order, hours):
        with pytest.raises(ValidationError):
            schedule_service.update_time_spent(order_id="ro-1", hours=hours)
        assert repair_order_service.get_repair_order("ro-1")["time_spent"] == 0.0


class TestRepairOrders:
    def test_create_starts_pending(self, app):
        created = repair_order_service.create_repair_order(patch={
            "customer_name": "Ana Lima",
            "device_info": "Pixel 7",
            "issue": "No charge",
            "status": "completed",
        })
        assert created["status"] == "pending"
        assert created["assigned_technician_id"] is None
        assert created["parts"] == []

    def test_newest_first_and_pending(self, repair_order):
        created = repair_order_service.create_repair_order(patch={
            "customer_name": "Ana Lima",
            "device_info": "Pixel 7",
            "issue": "No charge",
        })
        repair_order_service.update_status(order_id="ro-1", status="in-progress")

        assert [o["id"] for o in repair_order_service.list_repair_orders()] == [created["id"], "ro-1"]
        assert [o["id"] for o in repair_order_service.get_pending_orders()] == [created["id"]]

    def test_parts_total(self, repair_order):
        updated = repair_order_service.update_repair_order(order_id="ro-1", patch={
            "parts": [
                {"name": "Screen", "price_cents": 8999, "quantity": 1},
                {"name": "Adhesive", "price_cents": 250, "quantity": 2},
            ],
        })
        assert updated["parts_total_cents"] == 9499

    def test_invalid_status(self, repair_order):
        with pytest.raises(ValidationError):
            repair_order_service.update_status(order_id="ro-1", status="lost")

    def test_search(self, repair_order):
        assert [o["id"] for o in repair_order_service.search_repair_orders("iphone")] == ["ro-1"]
        assert repair_order_service.search_repair_orders(status="completed") == []


class TestTechnicians:
    def test_create_is_available_and_appended(self, technician_t1):
        created = technician_service.create_technician(patch={"name": "Priya Nair", "status": "offline"})

        assert created["status"] == "available"
        ids = [t["id"] for t in technician_service.list_technicians()]
        assert ids == ["T1", created["id"]]

    def test_available_filter(self, technician_t1):
        created = technician_service.create_technician(patch={"name": "Priya Nair"})
        technician_service.update_technician(technician_id=created["id"], patch={"status": "busy"})

        assert [t["id"] for t in technician_service.get_available_technicians()] == ["T1"]

    def test_delete_keeps_order_reference(self, technician_t1, repair_order):
        schedule_service.move_order(order_id="ro-1", technician_id="T1", day="2024-01-17")
        technician_service.delete_technician(technician_id="T1")

        assert technician_service.get_technician("T1") is None
        assert repair_order_service.get_repair_order("ro-1")["assigned_technician_id"] == "T1"
