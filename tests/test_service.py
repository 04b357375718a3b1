"""Tests for the service layer and the command line."""

import pytest

from whisky_catalog import config, main
from whisky_catalog.errors import NotFoundError
from whisky_catalog.models import NotificationRequest, NotificationType, Rating
from whisky_catalog.notifications import NotificationDispatcher
from whisky_catalog.repository import WhiskyRepository
from whisky_catalog.service import CatalogService


@pytest.fixture
def service(write_csv, transport):
    repo = WhiskyRepository(write_csv([("Lagavulin", "Islay"), ("Talisker", "Island")]))
    dispatcher = NotificationDispatcher(
        [
            NotificationRequest("new@example.com", NotificationType.NEW_WHISKY),
            NotificationRequest("rate@example.com", NotificationType.NEW_RATING),
        ],
        transport,
    )
    return CatalogService(repo, dispatcher)


def test_add_whisky_notifies(service, transport):
    w = service.add_whisky("Ardbeg", "Islay")
    assert service.get_whisky(w.id).name == "Ardbeg"
    assert transport.recipients == ["new@example.com"]


def test_add_rating_notifies_with_new_rating(service, transport):
    lagavulin = service.list_whiskies(-1, -1)[0]
    rating = service.add_rating(lagavulin.id, 5, "Lagavulin")

    assert rating == Rating(5, "Lagavulin")
    [(_, recipient, subject, body)] = transport.sent
    assert recipient == "rate@example.com"
    assert "Lagavulin" in body and "5 star" in body


def test_failed_lookup_sends_nothing(service, transport):
    with pytest.raises(NotFoundError):
        service.add_rating("whatever", 5, "No such whisky")
    with pytest.raises(NotFoundError):
        service.update_whisky("No such whisky", "Islay")
    assert transport.sent == []


def test_service_without_dispatcher(write_csv):
    svc = CatalogService(WhiskyRepository(write_csv([("Lagavulin", "Islay")])))
    w = svc.add_whisky("Ardbeg", "Islay")
    svc.update_whisky("Ardbeg", "Islay (Kildalton)")
    assert svc.get_whisky(w.id).region_style == "Islay (Kildalton)"
    svc.delete_whisky(w.id)
    assert svc.get_whisky(w.id) is None


def test_cli_add_list_and_missing(write_csv, monkeypatch, capsys):
    csv_path = write_csv([("Lagavulin", "Islay")])
    monkeypatch.setattr(config, "EMAIL_ENABLED", False)

    assert main.main(["--csv", str(csv_path), "add", "Ardbeg", "Islay"]) == 0
    new_id = capsys.readouterr().out.strip()
    assert WhiskyRepository(csv_path).get_by_id(new_id).name == "Ardbeg"

    assert main.main(["--csv", str(csv_path), "list", "--all"]) == 0
    out = capsys.readouterr().out
    assert "Lagavulin [Islay]" in out and "Ardbeg [Islay]" in out

    assert main.main(["--csv", str(csv_path), "delete", "missing-id"]) == 1


def test_cli_show_after_list_on_id_less_csv(write_csv, monkeypatch, capsys):
    """Ids printed by one run still resolve in the next."""
    csv_path = write_csv([("Lagavulin", "Islay"), ("Talisker", "Island")])
    monkeypatch.setattr(config, "EMAIL_ENABLED", False)

    assert main.main(["--csv", str(csv_path), "list", "--all"]) == 0
    first_id = capsys.readouterr().out.splitlines()[0].split()[0]

    assert main.main(["--csv", str(csv_path), "show", first_id]) == 0
    assert "Lagavulin [Islay]" in capsys.readouterr().out


def test_cli_invalid_config_exits_with_error(write_csv, monkeypatch):
    csv_path = write_csv([("Lagavulin", "Islay")])
    monkeypatch.setattr(config, "EMAIL_MAX_ATTEMPTS", 0)

    assert main.main(["--csv", str(csv_path), "list"]) == 2
