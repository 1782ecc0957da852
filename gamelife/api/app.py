"""Flask API application."""

import logging
import os
import threading
import uuid
from typing import Callable, TypeVar

from flask import Flask, abort, jsonify, request
from pydantic import BaseModel, ValidationError
from werkzeug.exceptions import HTTPException

from gamelife.api.schemas import (
    CompleteQuestRequest,
    CreatePlayerRequest,
    DamageRequest,
    EndCycleRequest,
    MissedQuestsRequest,
    PurchaseRequest,
    TrainingRequest,
    ValueRequest,
)
from gamelife.api.settings_config import EngineSettingsManager
from gamelife.config import DEFAULT_DUMP_DIRECTORY, DEFAULT_LOG_LEVEL
from gamelife.engine.achievements import ACHIEVEMENT_CATALOG, AchievementTracker
from gamelife.engine.game_engine import ProgressionEngine
from gamelife.engine.quest_manager import QuestManager
from gamelife.models.boss import Boss
from gamelife.models.outcomes import OperationResult
from gamelife.models.quest import Quest
from gamelife.models.settings import EngineSettings
from gamelife.models.state import ProgressionState
from gamelife.persistence.state_dumper import StateDumper

logging.basicConfig(level=DEFAULT_LOG_LEVEL, format="[%(name)-19s - %(levelname)5s] %(message)s")

app = Flask("flask.gamelife")

BodyModel = TypeVar("BodyModel", bound=BaseModel)


@app.before_request
def log_request_info():
    app.logger.info(
        "Access to: %s from %s (%s)",
        request.url,
        request.headers.get("X-Forwarded-For", request.remote_addr),
        request.headers.get("User-Agent"),
    )


# Error handlers for API routes
@app.errorhandler(HTTPException)
def handle_http_exception(e: HTTPException):
    """Return JSON instead of HTML for HTTP errors in API routes."""
    if request.path.startswith("/api/"):
        response = e.get_response()
        response.data = jsonify(
            {
                "error": e.name,
                "code": e.code,
                "description": e.description,
            }
        ).data
        response.content_type = "application/json"
        return response
    return e


@app.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    """Malformed request bodies are client errors."""
    app.logger.warning(f"Rejected request body: {e}")
    return jsonify({"error": "Invalid request body", "message": str(e)}), 400


@app.errorhandler(500)
def handle_internal_error(e: Exception):
    """Handle 500 errors."""
    if request.path.startswith("/api/"):
        app.logger.error(f"Internal server error: {e}", exc_info=True)
        return jsonify({"error": "Internal Server Error", "message": "An unexpected error occurred"}), 500
    return "Internal Server Error", 500


# Global player storage: player_id -> engine, with one lock per player
_players: dict[str, ProgressionEngine] = {}
_player_locks: dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()
_settings_manager = EngineSettingsManager()

# State dumper for persisting progression state to disk
_dump_directory = os.getenv("GAMELIFE_DUMP_DIR", DEFAULT_DUMP_DIRECTORY)
_state_dumper = StateDumper(dump_directory=_dump_directory)


def _dump_player_state(state: ProgressionState) -> None:
    """Dump player state to disk."""
    try:
        _state_dumper.dump_state(state)
    except Exception as e:
        app.logger.error(f"Failed to dump player state {state.state_id}: {e}", exc_info=True)


def _register_engine(engine: ProgressionEngine) -> str:
    player_id = engine.state.state_id
    with _registry_lock:
        _players[player_id] = engine
        _player_locks[player_id] = threading.Lock()
    return player_id


def _get_engine(player_id: str) -> tuple[ProgressionEngine, threading.Lock]:
    """Get a player's engine and lock, or abort with 404."""
    with _registry_lock:
        engine = _players.get(player_id)
        lock = _player_locks.get(player_id)
    if engine is None or lock is None:
        abort(404, description=f"Player {player_id} not found")
    return engine, lock


def _parse_body(model_cls: type[BodyModel]) -> BodyModel:
    """Validate the JSON body; an empty body means all defaults."""
    if request.data and not request.is_json:
        abort(400, description="Content-Type must be application/json")
    data = request.get_json(silent=True)
    if data is None and request.data:
        abort(400, description="Request body is not valid JSON")
    if data is not None and not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return model_cls(**(data or {}))


def _load_all_players_from_disk() -> None:
    """Load all players from disk at startup."""
    try:
        app.logger.info("Loading players from disk...")
        loaded_states = _state_dumper.load_all_states()
        for player_id, state in loaded_states.items():
            try:
                _register_engine(ProgressionEngine(initial_state=state))
                app.logger.info(f"Successfully loaded player {player_id} (version {state.state_version})")
            except Exception as e:
                app.logger.error(f"Failed to restore player {player_id}: {e}", exc_info=True)
        app.logger.info(f"Loaded {len(loaded_states)} player(s) from disk")
    except Exception as e:
        app.logger.error(f"Error loading players from disk: {e}", exc_info=True)


# Load all players from disk at startup
_load_all_players_from_disk()


def _run_operation(player_id: str, operation: Callable[[ProgressionEngine], OperationResult]):
    """
    Apply one engine operation under the player's lock.

    Accepted operations are persisted and answered with 200; declined ones
    leave the state untouched and are answered with 409 and the reason code.
    """
    engine, lock = _get_engine(player_id)
    with lock:
        result = operation(engine)
        if not result.success:
            app.logger.warning(f"Declined operation for {player_id}: {result.reason.value} ({result.message})")
            return (
                jsonify(
                    {
                        "success": False,
                        "reason": result.reason.value,
                        "error": result.message,
                    }
                ),
                409,
            )
        _dump_player_state(engine.state)
        return jsonify(
            {
                "success": True,
                "result": result.model_dump(mode="json"),
                "state": _serialize_state_for_api(engine.state),
            }
        )


@app.route("/api/players", methods=["GET"])
def list_players():
    """List all players."""
    with _registry_lock:
        engines = list(_players.values())
    players = []
    for engine in engines:
        player = engine.state.player
        players.append(
            {
                "player_id": player.player_id,
                "name": player.name,
                "level": player.level,
                "rank": player.rank.value,
                "state_version": engine.state.state_version,
                "updated_at": engine.state.updated_at.isoformat(),
            }
        )
    return jsonify({"players": players})


@app.route("/api/players", methods=["POST"])
def create_player():
    """Create a new player."""
    body = _parse_body(CreatePlayerRequest)
    state = ProgressionEngine.create_initial_state(
        name=body.name,
        origin_story=body.origin_story,
        settings=body.settings or _settings_manager.settings,
    )
    engine = ProgressionEngine(initial_state=state)
    player_id = _register_engine(engine)
    _dump_player_state(engine.state)
    app.logger.info(f"Created player {player_id} ({state.player.name})")
    return jsonify({"success": True, "player_id": player_id, "state": _serialize_state_for_api(engine.state)}), 201


@app.route("/api/players/<player_id>", methods=["DELETE"])
def delete_player(player_id: str):
    """Delete a player and all its state files."""
    _get_engine(player_id)
    with _registry_lock:
        _players.pop(player_id, None)
        _player_locks.pop(player_id, None)
    app.logger.info(f"Removed player {player_id} from memory")

    try:
        _state_dumper.delete_state(player_id)
    except OSError as e:
        app.logger.error(f"Error deleting state files for {player_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to delete player", "message": str(e)}), 500
    return jsonify({"success": True, "message": f"Player {player_id} and all its state files have been deleted"})


@app.route("/api/players/<player_id>/state", methods=["GET"])
def get_state(player_id: str):
    engine, _ = _get_engine(player_id)
    return jsonify({"state": _serialize_state_for_api(engine.state)})


@app.route("/api/players/<player_id>/quests", methods=["POST"])
def add_quest(player_id: str):
    """Add a quest, or replace the quest with the same id."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="A JSON quest object is required")
    data.setdefault("quest_id", str(uuid.uuid4()))
    quest = Quest(**data)
    return _run_operation(player_id, lambda engine: engine.add_quest(quest))


@app.route("/api/players/<player_id>/quests/<quest_id>", methods=["DELETE"])
def remove_quest(player_id: str, quest_id: str):
    return _run_operation(player_id, lambda engine: engine.remove_quest(quest_id))


@app.route("/api/players/<player_id>/quests/<quest_id>/complete", methods=["POST"])
def complete_quest(player_id: str, quest_id: str):
    body = _parse_body(CompleteQuestRequest)
    return _run_operation(player_id, lambda engine: engine.complete_quest(quest_id, critical=body.critical))


@app.route("/api/players/<player_id>/quests/<quest_id>/progress", methods=["POST"])
def update_quest_progress(player_id: str, quest_id: str):
    body = _parse_body(ValueRequest)
    return _run_operation(player_id, lambda engine: engine.update_quest_progress(quest_id, body.value))


@app.route("/api/players/<player_id>/quests/reset", methods=["POST"])
def reset_quest_progress(player_id: str):
    return _run_operation(player_id, lambda engine: engine.reset_quest_progress())


@app.route("/api/players/<player_id>/undo", methods=["POST"])
def undo_last_completion(player_id: str):
    """Undo the most recent quest completion."""
    return _run_operation(player_id, lambda engine: engine.undo_last_completion())


@app.route("/api/players/<player_id>/bosses", methods=["POST"])
def add_boss(player_id: str):
    """Add a boss, or replace the boss with the same id."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="A JSON boss object is required")
    data.setdefault("boss_id", str(uuid.uuid4()))
    boss = Boss(**data)
    return _run_operation(player_id, lambda engine: engine.add_boss(boss))


@app.route("/api/players/<player_id>/bosses/<boss_id>", methods=["DELETE"])
def remove_boss(player_id: str, boss_id: str):
    return _run_operation(player_id, lambda engine: engine.remove_boss(boss_id))


@app.route("/api/players/<player_id>/bosses/<boss_id>/metric", methods=["POST"])
def apply_boss_metric(player_id: str, boss_id: str):
    body = _parse_body(ValueRequest)
    return _run_operation(player_id, lambda engine: engine.apply_boss_metric(boss_id, body.value))


@app.route("/api/players/<player_id>/damage", methods=["POST"])
def apply_damage(player_id: str):
    body = _parse_body(DamageRequest)
    return _run_operation(player_id, lambda engine: engine.apply_damage(body.amount))


@app.route("/api/players/<player_id>/missed", methods=["POST"])
def apply_missed_quests(player_id: str):
    body = _parse_body(MissedQuestsRequest)
    return _run_operation(player_id, lambda engine: engine.apply_missed_quests(body.count))


@app.route("/api/players/<player_id>/cycle/end", methods=["POST"])
def end_cycle(player_id: str):
    """Close the current daily cycle."""
    body = _parse_body(EndCycleRequest)
    return _run_operation(player_id, lambda engine: engine.end_cycle(body.day))


@app.route("/api/players/<player_id>/purchase", methods=["POST"])
def purchase(player_id: str):
    body = _parse_body(PurchaseRequest)
    return _run_operation(player_id, lambda engine: engine.purchase(body.cost))


@app.route("/api/players/<player_id>/shield", methods=["POST"])
def buy_streak_shield(player_id: str):
    return _run_operation(player_id, lambda engine: engine.buy_streak_shield())


@app.route("/api/players/<player_id>/training", methods=["POST"])
def record_training_session(player_id: str):
    body = _parse_body(TrainingRequest)
    return _run_operation(
        player_id, lambda engine: engine.record_training_session(body.stat_type, body.difficulty)
    )


@app.route("/api/players/<player_id>/achievements", methods=["GET"])
def list_achievements(player_id: str):
    """List the achievement catalog with the player's progress."""
    engine, _ = _get_engine(player_id)
    player = engine.state.player
    achievements = []
    for definition in ACHIEVEMENT_CATALOG:
        progress = AchievementTracker.progress(player, definition.achievement_id)
        achievements.append(
            {
                **definition.model_dump(mode="json"),
                "current": progress.current,
                "fraction": progress.fraction,
                "unlocked": AchievementTracker.is_unlocked(player, definition.achievement_id),
            }
        )
    return jsonify({"achievements": achievements})


@app.route("/api/players/<player_id>/achievements/claim", methods=["POST"])
def claim_achievements(player_id: str):
    return _run_operation(player_id, lambda engine: engine.claim_achievements())


@app.route("/api/players/<player_id>/settings", methods=["GET"])
def get_player_settings(player_id: str):
    engine, _ = _get_engine(player_id)
    return jsonify({"settings": engine.state.settings.model_dump()})


@app.route("/api/players/<player_id>/settings", methods=["POST"])
def update_player_settings(player_id: str):
    settings = _parse_body(EngineSettings)
    return _run_operation(player_id, lambda engine: engine.update_settings(settings))


@app.route("/api/players/<player_id>/history", methods=["GET"])
def list_snapshots(player_id: str):
    """List the operation log."""
    engine, _ = _get_engine(player_id)
    snapshots = engine.history.list_snapshots()
    return jsonify(
        {
            "snapshots": [
                {
                    "index": snap.index,
                    "timestamp": snap.timestamp.isoformat(),
                    "state_version": snap.state.state_version,
                    "metadata": snap.metadata,
                }
                for snap in snapshots
            ]
        }
    )


@app.route("/api/config/settings", methods=["GET"])
def get_default_settings():
    """Get the settings applied to new players."""
    return jsonify({"config": _settings_manager.settings.model_dump()})


@app.route("/api/config/settings", methods=["POST"])
def update_default_settings():
    """Update the settings applied to new players."""
    _settings_manager.update_settings(_parse_body(EngineSettings))
    return jsonify({"success": True, "config": _settings_manager.settings.model_dump()})


def _serialize_state_for_api(state: ProgressionState) -> dict:
    """Serialize state for API (the undo snapshot stays internal)."""
    serialized = state.model_dump(mode="json", exclude={"last_completion"})
    for quest, quest_json in zip(state.quests, serialized["quests"]):
        boss = state.get_boss(quest.linked_boss_id)
        quest_json["estimated_boss_damage"] = QuestManager.estimated_boss_damage(quest, boss, state.player.level)
    token = state.last_completion
    serialized["undo"] = {"available": token is not None, "quest_title": token.quest_title if token else None}
    return serialized


if __name__ == "__main__":
    app.run(debug=True, port=int(os.getenv("GAMELIFE_PORT", "5000")))
