from flask import current_app, request
from flask_socketio import emit
from blobverse import socketio

NAMESPACE = '/'


def _server():
    return current_app.extensions['battle_server']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _server().handle_connect(_get_sid())
    emit('CONNECTED')


def handle_disconnect(reason=None):
    _server().handle_disconnect(_get_sid())


def handle_message(data):
    _server().handle_message(_get_sid(), data)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the default namespace.

    Clients send every request on the ``message`` event with a ``type``
    discriminator; replies and notifications are emitted by event name.
    """
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('message', handle_message, namespace=NAMESPACE)
