# tests/fakes.py

"""Hand-written stand-ins for the channel layer and the fan-out"""


class RecordingChannelLayer:
    """Channel layer that keeps every message it is asked to send"""

    def __init__(self, failing=()):
        self.sent = []
        self.failing = set(failing)

    async def send(self, channel, message):
        if channel in self.failing:
            raise RuntimeError(f"{channel} is full")
        self.sent.append((channel, message))

    def messages_for(self, channel):
        return [message for name, message in self.sent if name == channel]


class RecordingFanout:
    """Collects publish() calls instead of pushing them anywhere"""

    def __init__(self):
        self.published = []

    def publish(self, target_user_id, event_name, payload):
        self.published.append((str(target_user_id), event_name, payload))
        return 1

    def events_for(self, user_id, event_name=None):
        return [
            (event, payload)
            for target, event, payload in self.published
            if target == str(user_id) and (event_name is None or event == event_name)
        ]

    def clear(self):
        self.published.clear()
