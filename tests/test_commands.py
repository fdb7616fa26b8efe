from botscript.config import InterpreterConfig
from botscript.interpreter import ExecutionState
from botscript.port import UP, Position


def test_say_formats_values(run_script, bot):
    result, interp = run_script('say 20\nsay 2.5\nsay true\nsay "hi"')
    assert result.success
    assert bot.messages == ['20', '2.5', 'true', 'hi']
    assert interp.last_command_result.message == 'Said: "hi"'
    assert interp.get_context().stats.commands_executed == 4


def test_goto_moves_bot(run_script, bot):
    result, interp = run_script('goto 10 64 (-5)')
    assert result.success
    assert bot.calls_named('goto')[0].args == (10.0, 64.0, -5.0)
    assert bot.position == Position(10, 64, -5)
    assert interp.last_command_result.message == 'Successfully moved to (10, 64, -5)'


def test_goto_requires_numbers(run_script, bot):
    result, _ = run_script('goto "a" 1 2')
    assert not result.success
    assert 'GOTO coordinates must be numbers, got string' in result.message
    assert bot.calls_named('goto') == []


def test_goto_timeout(run_script, bot):
    bot.goto_delay = 1.0
    result, _ = run_script('goto 1 2 3', config=InterpreterConfig(goto_timeout=0.01))
    assert not result.success
    assert 'Command failed: Goto failed: timed out' in result.message


def test_goto_port_failure(run_script, bot):
    bot.fail_on['goto'] = RuntimeError('path blocked')
    result, _ = run_script('goto 1 2 3\nsay "after"')
    assert result.message == 'Execution error at line 1, column 1: Command failed: Goto failed: path blocked'
    assert bot.messages == []


def test_attack_matches_any_identifier(run_script, bot):
    zombie = bot.add_entity('zombie', 'hostile', 3, 64, 0)
    steve = bot.add_entity('player', 'player', 2, 64, 0, username='Steve')
    result, _ = run_script('attack "zombie"\nattack "Steve"')
    assert result.success
    assert [c.args[0] for c in bot.calls_named('attack')] == [zombie, steve]


def test_attack_picks_nearest(run_script, bot):
    bot.add_entity('zombie', 'hostile', 30, 64, 0)
    near = bot.add_entity('zombie', 'hostile', 2, 64, 0)
    run_script('attack "hostile"')
    assert bot.calls_named('attack')[0].args[0] is near


def test_attack_missing_target(run_script, bot):
    result, _ = run_script('attack "creeper"')
    assert "Command failed: Target entity 'creeper' not found" in result.message


def test_dig_uses_best_tool(run_script, bot):
    bot.add_block('stone', 1, 64, 0)
    bot.add_item('pickaxe', type=257)
    bot.best_tools['stone'] = 'pickaxe'
    result, _ = run_script('dig "stone"')
    assert result.success
    names = [c.name for c in bot.calls if c.name in ('equip', 'dig')]
    assert names == ['equip', 'dig']
    assert bot.calls_named('equip')[0].args[1] == 'hand'
    assert Position(1, 64, 0) not in bot.blocks


def test_dig_without_type_takes_nearest(run_script, bot):
    bot.add_block('dirt', 1, 63, 0)
    bot.add_block('stone', 4, 63, 0)
    result, _ = run_script('dig')
    assert result.success
    assert bot.calls_named('dig')[0].args[0].name == 'dirt'


def test_dig_refuses_liquids(run_script, bot):
    bot.add_block('water', 1, 64, 0)
    result, _ = run_script('dig "water"')
    assert 'Cannot dig water' in result.message


def test_dig_too_far(run_script, bot):
    bot.add_block('stone', 20, 64, 0)
    result, _ = run_script('dig "stone"')
    assert 'too far away' in result.message
    assert bot.calls_named('dig') == []


def test_dig_nothing_found(run_script):
    result, _ = run_script('dig "diamond_ore"')
    assert "No 'diamond_ore' block found nearby" in result.message


def test_place_at_coordinates(run_script, bot):
    reference = bot.add_block('stone', 1, 64, 0)
    bot.add_item('cobblestone', count=16, type=4)
    result, interp = run_script('place "cobblestone" 1 65 0')
    assert result.success
    assert bot.calls_named('equip')[0].args[1] == 'hand'
    assert bot.calls_named('place_block')[0].args == (reference, UP)
    assert bot.blocks[Position(1, 65, 0)].name == 'cobblestone'
    assert interp.last_command_result.message == 'Placed cobblestone at (1, 65, 0)'


def test_place_on_nearest_block(run_script, bot):
    bot.add_block('grass', 0, 63, 1)
    bot.add_item('torch')
    result, _ = run_script('place "torch"')
    assert result.success
    assert bot.blocks[Position(0, 64, 1)].name == 'torch'


def test_place_needs_empty_target(run_script, bot):
    bot.add_block('stone', 1, 64, 0)
    bot.add_block('dirt', 1, 65, 0)
    bot.add_item('cobblestone')
    result, _ = run_script('place "cobblestone" 1 65 0')
    assert 'occupied by dirt' in result.message


def test_place_needs_support(run_script, bot):
    bot.add_item('cobblestone')
    result, _ = run_script('place "cobblestone" 1 65 0')
    assert 'No solid block below target position' in result.message


def test_place_missing_item(run_script, bot):
    bot.add_block('stone', 1, 64, 0)
    result, _ = run_script('place "cobblestone" 1 65 0')
    assert "Item 'cobblestone' not found in inventory" in result.message


def test_equip(run_script, bot):
    sword = bot.add_item('iron_sword')
    result, _ = run_script('equip "iron_sword"')
    assert result.success
    assert bot.calls_named('equip')[0].args == (sword, 'hand')
    assert bot.equipped is sword


def test_equip_destination_from_config(run_script, bot):
    bot.add_item('shield')
    run_script('equip "shield"', config=InterpreterConfig(equip_destination='off-hand'))
    assert bot.calls_named('equip')[0].args[1] == 'off-hand'


def test_equip_missing_item(run_script):
    result, _ = run_script('equip "iron_sword"')
    assert "Command failed: Item 'iron_sword' not found in inventory" in result.message


def test_drop_is_clamped_to_stack(run_script, bot):
    bot.add_item('dirt', count=4, type=3)
    result, interp = run_script('drop "dirt" 10')
    assert result.success
    assert bot.calls_named('toss')[0].args == (3, None, 4)
    assert interp.last_command_result.message == 'Dropped 4 dirt'


def test_drop_defaults_to_one(run_script, bot):
    bot.add_item('dirt', count=4, type=3)
    run_script('drop "dirt"')
    assert bot.calls_named('toss')[0].args == (3, None, 1)


def test_drop_floors_count(run_script, bot):
    bot.add_item('dirt', count=10, type=3)
    run_script('drop "dirt" 2.9')
    assert bot.calls_named('toss')[0].args == (3, None, 2)


def test_drop_count_must_be_positive(run_script, bot):
    bot.add_item('dirt', count=10, type=3)
    result, _ = run_script('drop "dirt" 0')
    assert 'DROP count must be a number of at least 1' in result.message
    assert bot.calls_named('toss') == []


def test_wait(run_script):
    result, interp = run_script('wait 0')
    assert result.success
    assert interp.last_command_result.message == 'Waited 0 seconds'


def test_wait_rejects_bad_durations(run_script):
    result, _ = run_script('wait -1')
    assert 'WAIT duration must be a non-negative number' in result.message
    result, _ = run_script('wait "soon"')
    assert 'WAIT duration must be a non-negative number' in result.message


def test_chat_failure_is_a_command_failure(run_script, bot):
    bot.fail_on['send_message'] = RuntimeError('chat offline')
    result, interp = run_script('say "hi"')
    assert not result.success
    assert result.message == 'Execution error at line 1, column 1: Command failed: chat offline'
    assert interp.state == ExecutionState.FAILED
    assert interp.get_context().stats.errors == [result.message]
    assert interp.get_context().stats.end_time is not None
    assert not interp.is_executing()


def test_inventory_lookup_failure_is_a_command_failure(run_script, bot, monkeypatch):
    def unavailable(name):
        raise ConnectionError('inventory unavailable')

    monkeypatch.setattr(bot, 'find_item', unavailable)
    result, interp = run_script('equip "iron_sword"\nsay "after"')
    assert result.message == 'Execution error at line 1, column 1: Command failed: inventory unavailable'
    assert interp.state == ExecutionState.FAILED
    assert bot.messages == []


def test_position_lookup_failure_during_dig(run_script, bot, monkeypatch):
    bot.add_block('stone', 1, 64, 0)

    def lost():
        raise RuntimeError('position unknown')

    monkeypatch.setattr(bot, 'get_position', lost)
    result, interp = run_script('dig "stone"')
    assert 'Command failed: position unknown' in result.message
    assert interp.state == ExecutionState.FAILED


def test_invalid_argument_is_not_wrapped_as_command_failure(run_script, bot):
    result, _ = run_script('goto "a" 1 2')
    assert 'Command failed' not in result.message
    assert 'GOTO coordinates must be numbers' in result.message
