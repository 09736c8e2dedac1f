from flask import Blueprint, current_app, g, jsonify, request

from taskvault.models.task_model import NewTask, TaskPatch, completed_filter
from taskvault.utils.auth import auth_required
from taskvault.utils.db import get_stores


tasks_bp = Blueprint("tasks", __name__)


def _json_body():
    """Parsed JSON body; an empty body counts as an empty object."""
    if not request.get_data():
        return {}
    return request.get_json(silent=True)


@tasks_bp.get("")
@auth_required
def list_tasks():
    completed = completed_filter(request.args.get("status"))
    tasks = get_stores().tasks.list(owner_id=g.account_id, completed=completed)
    return jsonify([t.to_dict() for t in tasks]), 200


@tasks_bp.get("/stats")
@auth_required
def task_stats():
    return jsonify(get_stores().tasks.stats(owner_id=g.account_id).to_dict()), 200


@tasks_bp.post("")
@auth_required
def create_task():
    fields = NewTask.from_payload(_json_body())
    task = get_stores().tasks.create(fields, owner_id=g.account_id)
    current_app.logger.info("Created task %s", task.id)
    return jsonify(task.to_dict()), 201


@tasks_bp.patch("/<task_id>")
@auth_required
def update_task(task_id):
    patch = TaskPatch.from_payload(_json_body())
    task = get_stores().tasks.update(task_id, patch, owner_id=g.account_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.delete("/<task_id>")
@auth_required
def delete_task(task_id):
    get_stores().tasks.delete(task_id, owner_id=g.account_id)
    current_app.logger.info("Deleted task %s", task_id)
    return jsonify(message="Task deleted", id=task_id), 200
