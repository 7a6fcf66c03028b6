import inspect
import logging

log = logging.getLogger("presencekit.fake")


class FakeSink:
    """In-memory PresenceSink: records logins and payloads, fires ready on demand."""

    def __init__(self, result=None):
        self.logins = []
        self.activities = []
        self.handlers = {}
        self.result = result

    def login(self, identifier):
        self.logins.append(identifier)
        return True

    def once(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def set_activity(self, payload):
        self.activities.append(dict(payload))
        return self.result

    async def fire(self, event, *args):
        handlers = self.handlers.pop(event, [])
        for h in handlers:
            res = h(*args)
            if inspect.isawaitable(res):
                await res
        return len(handlers)


class FakeAppCmdTree:
    def __init__(self):
        self.syncs = 0

    async def sync(self, *args, **kwargs):
        self.syncs += 1
        return []


class FakeResponse:
    def __init__(self):
        self.sent = []

    async def send_message(self, content=None, **kwargs):
        self.sent.append(content)


class FakeInteraction:
    """``user`` may be a member (with guild_permissions) or a bare DM user."""

    def __init__(self, user):
        self.user = user
        self.response = FakeResponse()


class FakeBot:
    """Just enough of commands.Bot for DiscordPresenceSink."""

    def __init__(self):
        self.listeners = {}
        self.presences = []
        self.started_with = None
        self.cogs = {}
        self.tree = FakeAppCmdTree()

    def add_listener(self, func, name):
        self.listeners.setdefault(name, []).append(func)

    def remove_listener(self, func, name):
        if func in self.listeners.get(name, []):
            self.listeners[name].remove(func)

    async def dispatch_async(self, name, *args):
        for f in list(self.listeners.get(name, [])):
            await f(*args)

    async def start(self, token):
        self.started_with = token
        return True

    async def change_presence(self, *, activity=None, status=None):
        self.presences.append((activity, status))
        return True

    def get_cog(self, name):
        return self.cogs.get(name)

    async def add_cog(self, cog):
        self.cogs[cog.__class__.__name__] = cog
        return True
