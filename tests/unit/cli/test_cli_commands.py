from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from src.automarket.core.services.car import CarService
from src.automarket.entities.car import CarStatus
from src.cli import app
from tests.fixtures.auth import SELLER_ID
from tests.utils import car_fields

runner = CliRunner()


@pytest.fixture
def cli_store(memory_store, registered_users):
    with (
        patch("src.cli.user_commands.open_store", return_value=memory_store),
        patch("src.cli.market_commands.open_store", return_value=memory_store),
    ):
        yield memory_store


class TestUserCommands:
    def test_list_sellers(self, cli_store):
        result = runner.invoke(app, ["users", "list", "--role", "seller"])

        assert result.exit_code == 0
        assert "seller-uid-1" in result.stdout
        assert "Found 2 users" in result.stdout

    def test_list_unknown_role(self, cli_store):
        result = runner.invoke(app, ["users", "list", "--role", "admin"])

        assert result.exit_code == 1

    def test_find_by_email(self, cli_store):
        result = runner.invoke(app, ["users", "find", "--email", "buyer@example.com"])

        assert result.exit_code == 0
        assert "customer-uid-1" in result.stdout

    def test_find_by_name_no_match(self, cli_store):
        result = runner.invoke(app, ["users", "find", "--name", "zzz"])

        assert result.exit_code == 0
        assert "No matching users" in result.stdout

    def test_find_requires_a_filter(self, cli_store):
        assert runner.invoke(app, ["users", "find"]).exit_code == 1


class TestMarketCommands:
    def test_stats(self, cli_store, car_service: CarService):
        car = car_service.create_car(car_fields(), seller_id=SELLER_ID)
        car_service.update_car_status(car.id, CarStatus.ACTIVE, SELLER_ID)
        car_service.create_car(car_fields(), seller_id=SELLER_ID)

        result = runner.invoke(app, ["market", "stats", "--seller", SELLER_ID])

        assert result.exit_code == 0
        assert "PENDING_APPROVAL" in result.stdout
        assert "1 active listings" in result.stdout

    def test_memory_backend_rejected(self):
        result = runner.invoke(app, ["users", "list"])

        assert result.exit_code == 1
        assert "sql" in result.stdout
