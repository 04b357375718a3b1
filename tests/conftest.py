"""Shared fixtures for catalog tests."""

import json

import pytest

from whisky_catalog.errors import TransportError


class FakeTransport:
    """Records every send; addresses in `failing` raise TransportError."""

    def __init__(self, failing=()):
        self.sent = []
        self.failing = set(failing)

    def send(self, sender, recipient, subject, body):
        if recipient in self.failing:
            raise TransportError(f"refused: {recipient}")
        self.sent.append((sender, recipient, subject, body))

    @property
    def recipients(self):
        return [s[1] for s in self.sent]


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def write_csv(tmp_path):
    """Write a whisky CSV with the given header and rows, return its path."""

    def _write(rows, header="Name,RegionStyle", name="whisky.csv"):
        path = tmp_path / name
        lines = [header] + [",".join(r) for r in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_json(tmp_path):
    def _write(data, name):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
