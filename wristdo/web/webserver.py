"""
Flask web server for WristDo remote text entry.
Provides a small page for:
- Typing new tasks on a phone or laptop
- Deleting tasks
"""

from flask import Flask, render_template_string
import logging
import threading

from wristdo.apps.todo.manager import TodoManager
from wristdo.apps.todo.routes import create_todo_blueprint


class WristDoWebServer:
    """
    Web server for composing tasks away from the watch keyboard
    """

    def __init__(self, manager: TodoManager, port: int = 5000, max_length: int = 120):
        """
        Initialize web server

        Args:
            manager: TodoManager shared with the device screens
            port: Port to run server on
            max_length: Longest task text accepted
        """
        self.logger = logging.getLogger(__name__)
        self.manager = manager
        self.port = port
        self.max_length = max_length
        self.flask_app = Flask(__name__)
        self.flask_app.config['MAX_CONTENT_LENGTH'] = 16 * 1024

        self.flask_app.register_blueprint(create_todo_blueprint(manager, max_length))
        self._setup_routes()

    def _setup_routes(self):
        """Setup page routes"""

        @self.flask_app.route('/')
        def index():
            """Compose page with the current list"""
            return render_template_string(HTML_TEMPLATE, tasks=self.manager.get_tasks(),
                                          max_length=self.max_length)

    def run(self):
        """Start the web server in a separate thread"""
        thread = threading.Thread(target=self._run_server, daemon=True)
        thread.start()
        self.logger.info(f"Web server started on port {self.port}")

    def _run_server(self):
        """Internal method to run Flask server"""
        self.flask_app.run(host='0.0.0.0', port=self.port, debug=False, use_reloader=False)


HTML_TEMPLATE = '''
<!DOCTYPE html>
<html>
<head>
    <title>WristDo</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body { font-family: Arial, sans-serif; max-width: 480px; margin: 0 auto; padding: 16px; background: #f5f5f5; }
        .section { background: white; padding: 16px; margin: 16px 0; border-radius: 8px; }
        input[type=text] { width: 100%; padding: 10px; font-size: 16px; box-sizing: border-box; }
        button { padding: 8px 14px; margin-top: 8px; border: none; border-radius: 4px; background: #333; color: white; }
        li { display: flex; justify-content: space-between; align-items: center; padding: 6px 0; }
        li button { background: #808080; margin: 0; }
    </style>
</head>
<body>
    <h1>WristDo</h1>
    <div class="section">
        <form id="add-form">
            <input type="text" id="task-text" placeholder="New task" maxlength="{{ max_length }}" autofocus>
            <button type="submit">Add</button>
        </form>
    </div>
    <div class="section">
        <ul id="tasks">
        {% for task in tasks %}
            <li>{{ task.text }} <button onclick="removeTask({{ task.id }})">Delete</button></li>
        {% else %}
            <li>No tasks yet</li>
        {% endfor %}
        </ul>
    </div>
    <script>
        document.getElementById('add-form').addEventListener('submit', function (e) {
            e.preventDefault();
            const text = document.getElementById('task-text').value;
            fetch('/api/tasks', {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify({text: text})
            }).then(function () { location.reload(); });
        });
        function removeTask(id) {
            fetch('/api/tasks/' + id, {method: 'DELETE'}).then(function () { location.reload(); });
        }
    </script>
</body>
</html>
'''
