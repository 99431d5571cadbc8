"""
To-Do List API Routes

Flask Blueprint for composing and removing tasks from a phone or laptop.
Every mutation goes through the same TodoManager as the device buttons,
so the e-paper list refreshes on its own.
"""

import logging
from concurrent.futures import TimeoutError as FutureTimeoutError

from flask import Blueprint, jsonify, request

from .errors import NotFoundError, ValidationError, validate_task_text
from .manager import TodoManager

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0


def _task_list(tasks):
    return [task.to_dict() for task in tasks]


def create_todo_blueprint(manager: TodoManager, max_length: int = 120) -> Blueprint:
    """
    Build the To-Do blueprint bound to a manager

    Args:
        manager: TodoManager instance
        max_length: Longest task text accepted, same cap as the input screen

    Returns:
        Flask Blueprint with the /api/tasks routes
    """
    todo_bp = Blueprint('todo', __name__)

    @todo_bp.route('/api/tasks', methods=['GET'])
    def get_tasks():
        """Get all to-do tasks"""
        return jsonify({'tasks': _task_list(manager.get_tasks())})

    @todo_bp.route('/api/tasks', methods=['POST'])
    def add_task():
        """Add a new to-do task"""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        try:
            text = validate_task_text(data.get('text'))
        except ValidationError as e:
            return jsonify({'error': str(e)}), 400

        if len(text) > max_length:
            return jsonify({'error': f'Task text is limited to {max_length} characters'}), 400

        try:
            tasks = manager.add_task(text).result(timeout=REQUEST_TIMEOUT)
        except FutureTimeoutError:
            logger.error(f"Timed out adding todo: {text}")
            return jsonify({'error': 'Storage timed out'}), 504
        except RuntimeError as e:
            return jsonify({'error': str(e)}), 503

        if tasks is None:
            return jsonify({'error': manager.error or 'Storage error'}), 500

        logger.info(f"Added todo from web: {text}")
        return jsonify({'success': True, 'tasks': _task_list(tasks)}), 201

    @todo_bp.route('/api/tasks/<int:task_id>', methods=['DELETE'])
    def delete_task(task_id):
        """Delete a to-do task"""
        try:
            tasks = manager.delete_task(task_id, report_missing=True).result(timeout=REQUEST_TIMEOUT)
        except NotFoundError:
            return jsonify({'error': 'Task not found'}), 404
        except FutureTimeoutError:
            logger.error(f"Timed out deleting todo {task_id}")
            return jsonify({'error': 'Storage timed out'}), 504
        except RuntimeError as e:
            return jsonify({'error': str(e)}), 503

        if tasks is None:
            return jsonify({'error': manager.error or 'Storage error'}), 500

        logger.info(f"Deleted todo {task_id} from web")
        return jsonify({'success': True, 'tasks': _task_list(tasks)})

    return todo_bp
