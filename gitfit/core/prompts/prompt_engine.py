from __future__ import annotations

from datetime import datetime
from typing import Optional

from gitfit.core.monitor.types import VibeMonitorState
from gitfit.core.workouts.exercises import Exercise


def build_workout_payload(exercise: Exercise, waited_s: Optional[float] = None) -> dict:
    title = "Time for a micro-workout!"
    lead = f"You've been waiting on AI for {int(waited_s)}s." if waited_s else "You've been waiting on AI for a while."
    body_lines = [lead, "", f"{exercise.name} ({exercise.duration_s}s, {exercise.category})", exercise.description]
    return {"title": title, "body": "\n".join(body_lines)}


def build_status_text(state: VibeMonitorState, snoozed_until: Optional[datetime] = None) -> str:
    if snoozed_until is not None:
        return f"Snoozed until {snoozed_until.strftime('%H:%M')}"
    if state.status != "RUNNING":
        return "Status: Stopped"
    vibe = state.vibe
    if vibe.kind == "WAITING":
        return f"Waiting: {vibe.app}... {int(vibe.elapsed_s)}s"
    if vibe.kind == "IN_TRACKED_APP":
        return f"In: {vibe.app}"
    if vibe.kind == "WORKOUT_TRIGGERED":
        return "Time to move!"
    return "Status: Idle"
