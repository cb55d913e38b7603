import threading

from bot import Bot
from conversations import MemoryConversationStore
from dialogue import START_MESSAGE, DialogueEngine
from models import GuessState, StartState
from wordstore import WordStore


class RecordingChannel:
    def __init__(self):
        self.sent = []

    def send(self, chat_id, text):
        self.sent.append((chat_id, text))


class BrokenChannel:
    def send(self, chat_id, text):
        raise ConnectionError("provider unreachable")


def make_bot(channel=None):
    store = WordStore(["crane"], ["crane", "slate"])
    conversations = MemoryConversationStore()
    return Bot(DialogueEngine(store), conversations, channel=channel), conversations


def test_reply_is_delivered_and_state_saved():
    channel = RecordingChannel()
    bot, conversations = make_bot(channel)

    delivery = bot.handle_message(1, "/wordle")

    assert delivery.delivered
    assert delivery.reply == START_MESSAGE
    assert channel.sent == [("1", START_MESSAGE)]
    assert isinstance(conversations.get("1"), GuessState)


def test_ignored_text_sends_nothing():
    channel = RecordingChannel()
    bot, _ = make_bot(channel)

    delivery = bot.handle_message("1", "hello")

    assert delivery.reply is None
    assert not delivery.delivered
    assert channel.sent == []


def test_delivery_failure_does_not_change_transition(caplog):
    bot, conversations = make_bot(BrokenChannel())

    delivery = bot.handle_message("1", "/wordle")
    assert not delivery.delivered
    assert isinstance(delivery.error, ConnectionError)
    assert isinstance(conversations.get("1"), GuessState)
    assert "Failed to deliver reply to chat 1" in caplog.text

    delivery = bot.handle_message("1", "/guess crane")
    assert delivery.reply.startswith("You won. 1/6")
    assert conversations.get("1") == StartState()


def test_conversations_are_independent():
    bot, conversations = make_bot()
    bot.handle_message("a", "/wordle")
    bot.handle_message("b", "/wordle")
    bot.handle_message("a", "/guess slate")

    assert conversations.get("a").tries == 1
    assert conversations.get("b").tries == 0


def test_messages_of_one_conversation_are_serialised():
    bot, conversations = make_bot()
    bot.handle_message("a", "/wordle")

    threads = [threading.Thread(target=bot.handle_message, args=("a", "/guess slate")) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert conversations.get("a").tries == 5


def test_lock_map_only_holds_active_conversations():
    bot, _ = make_bot()
    for i in range(1000):
        bot.handle_message(i, "hello")
    bot.handle_message("a", "/wordle")

    assert bot._locks == {}
