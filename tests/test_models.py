"""Tests for model (de)serialisation edge cases."""

import pytest

from whisky_catalog.errors import DeserializationError, NotFoundError
from whisky_catalog.models import NotificationRequest, NotificationType, Rating, Whisky


def test_rating_rejects_non_integer_stars():
    with pytest.raises(DeserializationError):
        Rating.from_dict({"Stars": "five", "Message": "x"})
    with pytest.raises(DeserializationError):
        Rating.from_dict({"Stars": True, "Message": "x"})


def test_whisky_row_is_trimmed_and_has_no_ratings():
    row = Whisky(" Ardbeg ", " Islay", id="abc", ratings=[Rating(5, "x")]).to_row()
    assert row == {"Id": "abc", "Name": "Ardbeg", "RegionStyle": "Islay"}


def test_notification_request_region_optional():
    req = NotificationRequest.from_dict({"EmailAddress": "a@example.com", "NotificationType": "new_rating"})
    assert req.notification_type is NotificationType.NEW_RATING
    assert req.region is None
    assert not req.matches_region("Islay")


def test_notification_request_requires_email():
    with pytest.raises(DeserializationError):
        NotificationRequest.from_dict({"NotificationType": "NEW_WHISKY"})


def test_not_found_error_is_a_key_error_with_readable_message():
    err = NotFoundError("Whisky not found: Ardbeg")
    assert isinstance(err, KeyError)
    assert str(err) == "Whisky not found: Ardbeg"
