"""Optional per-user persistence of the last loaded syllabus and its progress."""

from __future__ import annotations

import json
import re
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .progress import CompletionMap
from .session import SessionSnapshot
from .types import Subject, SubjectSummary, SyllabusSummary, TopicSummary, Unit


class ProgressStore(Protocol):
    def load(self, user_id: str) -> Optional[SessionSnapshot]: ...

    def save(self, user_id: str, snapshot: SessionSnapshot) -> None: ...


class JsonProgressStore:
    """Stores one JSON document per user in a directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, user_id: str) -> Path:
        return self.root / _sanitize_user_filename(user_id)

    def load(self, user_id: str) -> Optional[SessionSnapshot]:
        path = self.path_for(user_id)
        if not path.exists():
            return None
        payload = json.loads(path.read_text(encoding="utf-8"))
        return snapshot_from_dict(payload)

    def save(self, user_id: str, snapshot: SessionSnapshot) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.path_for(user_id).write_text(
            json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


def snapshot_to_dict(snapshot: SessionSnapshot) -> Dict[str, Any]:
    return {
        "syllabus_text": snapshot.syllabus_text,
        "subjects": [asdict(subject) for subject in snapshot.subjects],
        "summary": asdict(snapshot.summary),
        "completed": [
            [key.subject, key.unit, key.topic]
            for key, done in snapshot.completion.items()
            if done
        ],
    }


def snapshot_from_dict(payload: Dict[str, Any]) -> SessionSnapshot:
    subjects = [
        Subject(
            name=item["name"],
            units=[Unit(name=unit["name"], topics=list(unit["topics"])) for unit in item.get("units", [])],
        )
        for item in payload.get("subjects", [])
    ]
    raw_summary = payload.get("summary") or {}
    summary = SyllabusSummary(
        overall_summary=raw_summary.get("overall_summary", ""),
        subject_summaries=[
            SubjectSummary(
                subject_name=entry["subject_name"],
                subject_summary=entry["subject_summary"],
                topic_summaries=[
                    TopicSummary(topic_name=ts["topic_name"], summary=ts["summary"])
                    for ts in entry.get("topic_summaries", [])
                ],
            )
            for entry in raw_summary.get("subject_summaries", [])
        ],
    )
    completion = CompletionMap({tuple(key): True for key in payload.get("completed", [])})
    return SessionSnapshot(
        syllabus_text=payload.get("syllabus_text", ""),
        subjects=subjects,
        summary=summary,
        completion=completion,
    )


def _sanitize_user_filename(user_id: str) -> str:
    sanitized = re.sub(r"[^A-Za-z0-9._-]+", "_", user_id.strip())
    sanitized = sanitized.strip("._")
    if not sanitized:
        sanitized = "anonymous"
    return f"{sanitized}.json"
