"""Multi-turn intake conversations over the HTTP API."""

import json

import pytest
import yaml
from fastapi.testclient import TestClient

from wasifu.config import ConfigLoader
from wasifu.config.models import WasifuConfig
from wasifu.server.api import create_app

pytestmark = pytest.mark.integration


class Conversation:
    """Drives one user's conversation through /chat."""

    def __init__(self, client: TestClient, user_id: str) -> None:
        self.client = client
        self.user_id = user_id
        self.count = 0

    def say(self, message: str) -> dict:
        self.count += 1
        response = self.client.post(
            "/chat",
            json={
                "user_id": self.user_id,
                "message": message,
                "message_id": f"{self.user_id}-{self.count}",
            },
        )
        assert response.status_code == 200, response.text
        return response.json()


@pytest.fixture
def client():
    with TestClient(create_app(WasifuConfig())) as client:
        yield client


def test_english_registration_and_news(client):
    """
    GIVEN the extended flow
    WHEN a user registers in English and browses the news menu
    THEN the profile is stored and the menus loop as expected
    """
    user = Conversation(client, "254700000001")

    assert user.say("Hello")["choices"] == ["Kiswahili", "English"]
    assert user.say("2")["prompt"] == "Please enter your name."

    thanks = user.say("Amina")
    assert thanks["messages"] == ["Thanks Amina."]
    assert thanks["prompt"] == "Which county do you live in?"

    retry = user.say("Gotham")
    assert retry["prompt"] == "Please enter a valid county name"

    assert "Westlands" in user.say("Nairobi")["choices"]
    assert user.say("Westlands")["choices"] == ["Sub 1", "ub"]

    summary = user.say("Sub 1")
    assert summary["prompt"].startswith("CONGRATULATIONS!! Amina")

    menu = user.say("MAIN MENU")
    assert "NEWS" in menu["choices"]

    unavailable = user.say("REFERRAL")
    assert unavailable["messages"] == ["REFERRAL is not available yet."]

    user.say("NEWS")
    card = user.say("LATEST LEGAL NEWS")
    assert card["card"] is not None

    link = user.say("1")
    assert link["messages"][0].startswith("Latest legal news: ")
    assert link["card"] is not None

    back = user.say("Go back")
    assert back["choices"] == menu["choices"]

    profile = client.get("/profile/254700000001").json()
    assert profile["ward"] == "Sub 1"
    assert profile["language"] == "EN"


def test_swahili_registration(client):
    user = Conversation(client, "254700000002")

    user.say("Habari")
    assert user.say("Kiswahili")["prompt"] == "Tafadhali weka jina lako"
    assert user.say("Juma")["messages"] == ["Asante Juma."]
    user.say("Mombasa")
    user.say("Likoni")
    summary = user.say("ub")

    assert summary["prompt"].startswith("Hongera Juma")
    assert summary["choices"] == ["MAIN MENU", "RUDI NYUMA"]

    restarted = user.say("RUDI NYUMA")
    assert restarted["choices"] == ["Kiswahili", "English"]


def test_redelivered_message_is_not_applied_twice(client):
    payload = {"user_id": "254700000003", "message": "English", "message_id": "wamid-2"}
    client.post("/chat", json={"user_id": "254700000003", "message": "hi"})

    first = client.post("/chat", json=payload).json()
    second = client.post("/chat", json=payload).json()

    assert first == second
    assert client.get("/state/254700000003").json()["answers"] == {"language": "EN"}


def test_basic_flow_from_config_file(tmp_path):
    """
    GIVEN a config file selecting the basic flow, fixed counties and custom data
    WHEN a user registers
    THEN the conversation ends at the summary with a closing message
    """
    # Arrange
    data = [
        {"name": "Kisumu", "code": 42, "capital": "Kisumu City", "sub_counties": ["Seme"]},
        {"name": "Nakuru", "code": 32, "capital": "Nakuru", "sub_counties": ["Naivasha"]},
    ]
    (tmp_path / "counties.json").write_text(json.dumps(data), encoding="utf-8")
    (tmp_path / "wasifu.yaml").write_text(
        yaml.safe_dump(
            {
                "version": "1.0",
                "settings": {
                    "flow": {
                        "variant": "basic",
                        "county_choices": ["Kisumu", "Nakuru"],
                        "ward_choices": ["Central"],
                    },
                    "reference_data": {"path": "counties.json"},
                },
            }
        ),
        encoding="utf-8",
    )
    config = ConfigLoader.load(tmp_path)

    # Act
    with TestClient(create_app(config)) as client:
        user = Conversation(client, "254700000004")
        user.say("hi")
        user.say("English")
        assert user.say("Otieno")["choices"] == ["Kisumu", "Nakuru"]
        assert user.say("Kisumu")["choices"] == ["Seme"]
        assert user.say("Seme")["choices"] == ["Central"]
        user.say("Central")
        closing = user.say("MAIN MENU")
        state = client.get("/state/254700000004").json()

    # Assert
    assert closing["completed"] is True
    assert closing["messages"] == ["Thank you Otieno, your registration is complete."]
    assert state["completed"] is True
