from datetime import datetime, timezone
from io import BytesIO
from typing import List, Optional, Tuple

import pytz
from PIL import Image, ImageDraw

import config
from state import Session
from veto import BAN, MAPS_PLAYED, MATCH_FORMATS, PICK_MAP, VetoResult


def mention(user_id: int) -> str:
    return f"<@{user_id}>"


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """Render ``dt`` (default: now) in the configured user timezone."""
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    local = dt.astimezone(pytz.timezone(config.CONFIG["user_timezone"]))
    return local.strftime("%Y-%m-%d %H:%M %Z")


# ─── Message text ──────────────────────────────────────────────────────────────
def format_coinflip_prompt(initiator_id: int, opponent_id: int) -> str:
    return (
        f"{mention(initiator_id)}, choose **Heads** or **Tails**. "
        f"{mention(opponent_id)} will get the other."
    )


def format_coinflip_result(initiator_id: int, opponent_id: int, flip, winner_id: int) -> str:
    return (
        f"🪙 {mention(initiator_id)} chose **{flip.team_a_side}**\n"
        f"{mention(opponent_id)} gets **{flip.team_b_side}**\n"
        f"**Coin landed on {flip.landed_on}!** 🎉\n"
        f"➡️ {mention(winner_id)}, please select a match format."
    )


def format_format_selected(match_type: str) -> str:
    maps = MAPS_PLAYED[match_type]
    return (
        f"✅ Match format selected: **{match_type}** "
        f"({MATCH_FORMATS[match_type]}, {maps} map{'' if maps == 1 else 's'})"
    )


def format_veto_start(session: Session) -> str:
    return (
        f"🗺️ Veto **{session.match_type}** started between "
        f"**{session.team_a_name}** and **{session.team_b_name}**!"
    )


def format_step_result(session: Session, actor_id: int, result: VetoResult) -> str:
    if result.step.kind == BAN:
        return f"🚫 {mention(actor_id)} banned **{result.map_name}**"
    if result.step.kind == PICK_MAP:
        return f"✅ {mention(actor_id)} picked **{result.map_name}** as Map {len(session.picks)}"
    return f"🧭 {mention(actor_id)} picked **{result.value}** side for **{result.map_name}**."


def format_prompt(actor_id: int, label: str) -> str:
    return f"{mention(actor_id)}, {label}."


def summary_rows(session: Session) -> List[Tuple[str, str, str]]:
    return [
        (
            p.map,
            session.side_of(p, session.team_a_id) or "Unpicked",
            session.side_of(p, session.team_b_id) or "Unpicked",
        )
        for p in session.picks
    ]


def format_summary(session: Session, completed_at: Optional[datetime] = None) -> str:
    lines = [f"📋 Veto complete for **{session.match_type}** ({MATCH_FORMATS[session.match_type]})", ""]
    names = [session.team_name(t) for t in (session.team_a_id, session.team_b_id)]
    for i, (map_name, side_a, side_b) in enumerate(summary_rows(session), start=1):
        lines.append(
            f"**Map {i}: {map_name}** — **{names[0]}** ({side_a}), **{names[1]}** ({side_b})"
        )
    lines.append("")
    lines.append(f"Completed {format_timestamp(completed_at)}")
    return "\n".join(lines)


# ─── Summary image ─────────────────────────────────────────────────────────────
def create_summary_image(session: Session) -> BytesIO:
    """
    Build a PNG grid of the played maps and each team's starting side:
      • header row  → grey
      • Attacker    → red (#ff6b6b)
      • Defender    → blue (#6b9bff)
    """
    hdr_font, row_font = config.HDR_FONT, config.ROW_FONT
    rows = summary_rows(session)
    headers = ("Map", session.team_a_name, session.team_b_name)
    pad_x, pad_y, margin = 16, 8, 5

    scratch = ImageDraw.Draw(Image.new("RGB", (1, 1)))

    def measure(txt: str, fnt) -> Tuple[int, int]:
        b = scratch.textbbox((0, 0), txt, font=fnt)
        return b[2] - b[0], b[3] - b[1]

    labels = [f"{i}. {m}" for i, (m, _, _) in enumerate(rows, start=1)]
    col_w = []
    for col, hdr in enumerate(headers):
        cells = labels if col == 0 else [r[col] for r in rows]
        widest = max([measure(hdr, hdr_font)[0]] + [measure(c, row_font)[0] for c in cells])
        col_w.append(widest + pad_x * 2)
    hdr_h = measure("Map", hdr_font)[1] + pad_y * 2
    row_h = max([measure("Defender", row_font)[1]] + [measure(c, row_font)[1] for c in labels]) + pad_y * 2

    width = margin * 2 + sum(col_w)
    height = margin * 2 + hdr_h + row_h * len(rows)
    img = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(img)

    def cell(x: int, y: int, w: int, h: int, txt: str, fnt, fill: str) -> None:
        draw.rectangle([x, y, x + w, y + h], fill=fill, outline="black")
        tw, th = measure(txt, fnt)
        draw.text((x + (w - tw) / 2, y + (h - th) / 2), txt, fill="black", font=fnt)

    # Header
    x, y = margin, margin
    for w, hdr in zip(col_w, headers):
        cell(x, y, w, hdr_h, hdr, hdr_font, "#cccccc")
        x += w
    y += hdr_h

    # Rows
    for label, (_, side_a, side_b) in zip(labels, rows):
        x = margin
        for w, txt in zip(col_w, (label, side_a, side_b)):
            if txt == "Attacker":
                fill = "#ff6b6b"
            elif txt == "Defender":
                fill = "#6b9bff"
            else:
                fill = "#eeeeee"
            cell(x, y, w, row_h, txt, row_font, fill)
            x += w
        y += row_h

    buf = BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
