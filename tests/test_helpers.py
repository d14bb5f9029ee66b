"""Tests for message formatting and the summary image."""
from datetime import datetime, timezone

import pytest
from PIL import Image

import config
import helpers
import veto
from state import MapResult


@pytest.fixture
def finished_bo3(session):
    veto.choose_format(session, 111, "BO3")
    session.picks = [
        MapResult("Lotus", team_a_side="Attacker", team_b_side="Defender"),
        MapResult("Pearl", team_a_side="Defender", team_b_side="Attacker"),
        MapResult("Split"),
    ]
    session.veto_step = len(session.veto_sequence)
    return session


def test_format_timestamp_uses_configured_timezone(monkeypatch):
    monkeypatch.setitem(config.CONFIG, "user_timezone", "UTC")
    dt = datetime(2025, 1, 2, 3, 4, tzinfo=timezone.utc)
    assert helpers.format_timestamp(dt) == "2025-01-02 03:04 UTC"


def test_format_timestamp_treats_naive_as_utc(monkeypatch):
    monkeypatch.setitem(config.CONFIG, "user_timezone", "America/New_York")
    assert helpers.format_timestamp(datetime(2025, 1, 2, 15, 0)) == "2025-01-02 10:00 EST"


def test_summary_lists_every_map_with_sides(finished_bo3, monkeypatch):
    monkeypatch.setitem(config.CONFIG, "user_timezone", "UTC")
    text = helpers.format_summary(finished_bo3, datetime(2025, 1, 2, 3, 4, tzinfo=timezone.utc))
    lines = text.splitlines()

    assert lines[0] == "📋 Veto complete for **BO3** (Best of 3)"
    assert "**Map 1: Lotus** — **Alpha** (Attacker), **Bravo** (Defender)" in lines
    assert "**Map 2: Pearl** — **Alpha** (Defender), **Bravo** (Attacker)" in lines
    assert "**Map 3: Split** — **Alpha** (Unpicked), **Bravo** (Unpicked)" in lines
    assert lines[-1] == "Completed 2025-01-02 03:04 UTC"


def test_step_result_messages(session):
    veto.choose_format(session, 111, "BO3")
    ban = veto.apply_choice(session, 111, "Ascent")
    assert helpers.format_step_result(session, 111, ban) == "🚫 <@111> banned **Ascent**"

    veto.apply_choice(session, 222, "Icebox")
    pick = veto.apply_choice(session, 111, "Haven")
    assert helpers.format_step_result(session, 111, pick) == "✅ <@111> picked **Haven** as Map 1"

    side = veto.apply_choice(session, 222, "Defender")
    assert helpers.format_step_result(session, 222, side) == "🧭 <@222> picked **Defender** side for **Haven**."


def test_coinflip_messages():
    flip = type("Flip", (), {"team_a_side": "Heads", "team_b_side": "Tails", "landed_on": "Tails"})()
    assert helpers.format_coinflip_prompt(1, 2) == "<@1>, choose **Heads** or **Tails**. <@2> will get the other."
    text = helpers.format_coinflip_result(1, 2, flip, 2)
    assert "<@1> chose **Heads**" in text
    assert "<@2> gets **Tails**" in text
    assert text.endswith("<@2>, please select a match format.")


@pytest.mark.parametrize("match_type, text", [
    ("BO1", "✅ Match format selected: **BO1** (Best of 1, 1 map)"),
    ("BO5", "✅ Match format selected: **BO5** (Best of 5, 5 maps)"),
])
def test_format_selected_message(match_type, text):
    assert helpers.format_format_selected(match_type) == text


def test_veto_start_and_prompt(session):
    veto.choose_format(session, 111, "BO5")
    assert helpers.format_veto_start(session) == "🗺️ Veto **BO5** started between **Alpha** and **Bravo**!"
    assert helpers.format_prompt(111, "ban a map") == "<@111>, ban a map."


def test_summary_image_is_a_png_with_one_row_per_map(finished_bo3):
    buf = helpers.create_summary_image(finished_bo3)
    assert buf.getvalue().startswith(b"\x89PNG")

    img = Image.open(buf)
    assert img.width > 0

    one_map = helpers.create_summary_image(
        type(finished_bo3)(channel_id=1, team_a_id=111, team_b_id=222, match_type="BO1",
                           picks=[MapResult("Split", "Attacker", "Defender")])
    )
    assert Image.open(one_map).height < img.height
