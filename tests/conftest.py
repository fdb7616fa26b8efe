import asyncio

import pytest

from botscript.interpreter import Interpreter
from botscript.parser import parse_program
from botscript.testing.fakes import FakeBot


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def run_script(bot):
    """Parse and execute a script against the ``bot`` fixture."""
    def _run(source, config=None, context=None):
        interp = Interpreter(bot, context=context, config=config)
        result = asyncio.run(interp.execute(parse_program(source)))
        return result, interp
    return _run
