# extensions.py
from flask_socketio import SocketIO

# Bound to the app in create_app(); alert broadcasts go to the 'alerts' room.
socketio = SocketIO()
ALERTS_ROOM = 'alerts'
