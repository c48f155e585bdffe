import json
from types import SimpleNamespace

import httpx
import pytest

from assistant_chat.services.search_svc import SearchService


def make_tool_call(call_id, name, arguments=None):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=json.dumps(arguments or {})),
    )


def make_run(status, tool_calls=None, run_id="run_1"):
    required_action = None
    if tool_calls is not None:
        required_action = SimpleNamespace(
            type="submit_tool_outputs",
            submit_tool_outputs=SimpleNamespace(tool_calls=tool_calls),
        )
    return SimpleNamespace(id=run_id, status=status, required_action=required_action)


def make_message(role, text):
    content = [] if text is None else [SimpleNamespace(type="text", text=SimpleNamespace(value=text, annotations=[]))]
    return SimpleNamespace(role=role, content=content)


class FakeOpenAIService:
    """Scripted stand-in for OpenAIService: create_run returns the first run, get_run the rest (last one repeats)."""

    def __init__(self, runs, messages=None, thread_id="thread_new"):
        self.runs = list(runs)
        self.messages = messages if messages is not None else []
        self.thread_id = thread_id
        self.calls = []
        self.submitted = []
        self.fail_on = {}

    def _check(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def _next_run(self):
        return self.runs.pop(0) if len(self.runs) > 1 else self.runs[0]

    async def create_thread(self):
        self._check("create_thread")
        return SimpleNamespace(id=self.thread_id)

    async def add_message(self, thread_id, role, content):
        self._check("add_message")
        self.last_message = (thread_id, role, content)

    async def create_run(self, thread_id):
        self._check("create_run")
        return self._next_run()

    async def get_run(self, thread_id, run_id):
        self._check("get_run")
        return self._next_run()

    async def submit_tool_outputs(self, thread_id, run_id, tool_outputs):
        self._check("submit_tool_outputs")
        self.submitted.append(tool_outputs)

    async def list_messages(self, thread_id, limit=20):
        self._check("list_messages")
        return self.messages


@pytest.fixture
def tavily_requests():
    return []


@pytest.fixture
def tavily_factory(tavily_requests):
    """Builds a SearchService whose transport answers with the given handler."""

    def factory(handler, **kwargs):
        def recording_handler(request):
            tavily_requests.append(request)
            return handler(request)

        kwargs.setdefault("api_key", "tvly-test")
        kwargs.setdefault("default_domains", ["ey.com"])
        kwargs.setdefault("empty_means_unrestricted", False)
        kwargs.setdefault("timeout", 10)
        return SearchService(transport=httpx.MockTransport(recording_handler), **kwargs)

    return factory


def tavily_ok(results):
    return lambda request: httpx.Response(200, json={"query": "q", "results": results})
