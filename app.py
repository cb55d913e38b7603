import logging
import os

import redis
from dotenv import load_dotenv
from flask import Blueprint, Flask, current_app, jsonify, request
from flask_socketio import SocketIO, join_room

from bot import Bot
from conversations import MemoryConversationStore, RedisConversationStore
from dialogue import DialogueEngine
from persistence_worker import DEFAULT_FLUSH_INTERVAL, PersistenceWorker
from wordstore import load_store
from wordstore.files import DEFAULT_WORDS_DIR

logger = logging.getLogger(__name__)

socketio = SocketIO()


class SocketIOChannel:
    """Delivers replies to everyone in the conversation's Socket.IO room."""

    def __init__(self, sio):
        self.sio = sio

    def send(self, chat_id, text):
        self.sio.emit("reply", {"chat_id": chat_id, "text": text}, to=room_for(chat_id))


def room_for(chat_id) -> str:
    return f"chat:{chat_id}"


# Flask app setup
def create_app(test_config=None):
    """Factory function to create and configure Flask app."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    app.config["WORDS_DIR"] = os.environ.get("WORDS_DIR", str(DEFAULT_WORDS_DIR))
    app.config["FLUSH_INTERVAL"] = int(os.environ.get("FLUSH_INTERVAL", DEFAULT_FLUSH_INTERVAL))
    app.config["REDIS_URL"] = os.environ.get("REDIS_URL")
    app.config["SOCKETIO_MESSAGE_QUEUE"] = os.environ.get("SOCKETIO_MESSAGE_QUEUE")
    app.config["BOT_USERNAME"] = os.environ.get("BOT_USERNAME")
    app.config["CONVERSATION_TTL"] = None
    if test_config:
        app.config.update(test_config)

    # Word lists must load or the app does not start
    store = load_store(app.config["WORDS_DIR"])

    if app.config["REDIS_URL"]:
        r = redis.from_url(app.config["REDIS_URL"], decode_responses=True)
        conversations = RedisConversationStore(r, ttl=app.config["CONVERSATION_TTL"])
    else:
        conversations = MemoryConversationStore()

    socketio.init_app(
        app,
        cors_allowed_origins="*",
        message_queue=app.config["SOCKETIO_MESSAGE_QUEUE"],
    )

    engine = DialogueEngine(store, bot_username=app.config["BOT_USERNAME"])
    app.extensions["wordle"] = {
        "store": store,
        "bot": Bot(engine, conversations, channel=SocketIOChannel(socketio)),
    }

    app.register_blueprint(routes)
    return app


def get_bot() -> Bot:
    return current_app.extensions["wordle"]["bot"]


def parse_message(data):
    """Validate a {"chat_id", "text"} payload. Returns (chat_id, text) or an error string."""
    if not isinstance(data, dict):
        return None, "JSON object required"
    chat_id = data.get("chat_id")
    text = data.get("text")
    if chat_id is None or str(chat_id).strip() == "":
        return None, "chat_id required"
    if not isinstance(text, str):
        return None, "text must be a string"
    return (str(chat_id), text), None


# --------------------
# HTTP routes
# --------------------
routes = Blueprint("wordle", __name__)


@routes.route("/health")
def health():
    store = current_app.extensions["wordle"]["store"]
    playable, dictionary = store.counts()
    return jsonify({
        "status": "ok",
        "playable": playable,
        "dictionary": dictionary,
        "dirty": store.dirty,
    })


@routes.route("/messages", methods=["POST"])
def post_message():
    """Webhook for one incoming chat message."""
    message, error = parse_message(request.get_json(silent=True))
    if error:
        return jsonify({"error": error}), 400

    chat_id, text = message
    delivery = get_bot().handle_message(chat_id, text)
    return jsonify({"chat_id": chat_id, "reply": delivery.reply})


# --------------------
# Socket.IO events
# --------------------
@socketio.on("message")
def on_message(data):
    """Chat message over the socket; the reply comes back as a "reply" event."""
    message, error = parse_message(data)
    if error:
        return {"error": error}

    chat_id, text = message
    join_room(room_for(chat_id))
    get_bot().handle_message(chat_id, text)


def main():
    load_dotenv()
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app()
    worker = PersistenceWorker(
        app.extensions["wordle"]["store"],
        app.config["WORDS_DIR"],
        interval=app.config["FLUSH_INTERVAL"],
    )
    worker.start()
    try:
        port = int(os.environ.get("PORT", 5000))
        socketio.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=port, allow_unsafe_werkzeug=True)
    finally:
        logger.info("Shutting down, waiting for persistence worker")
        worker.stop()


if __name__ == "__main__":
    main()
