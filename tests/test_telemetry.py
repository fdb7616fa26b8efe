from botscript.port import Position
from botscript.telemetry import SystemSnapshot, collect_snapshot
from botscript.testing.fakes import FakeBot


def test_collect_snapshot_from_port():
    bot = FakeBot(position=Position(5, 70, -2))
    bot.vitals.health = 12
    bot.vitals.hunger = 4
    bot.is_raining = True
    bot.add_entity('zombie', 'hostile', 6, 70, -2)
    bot.add_entity('cow', 'animal', 4, 70, -2)
    bot.add_item('bread', count=3)

    variables = collect_snapshot(bot).to_variables()
    assert variables['bot_health'] == 12.0
    assert variables['bot_food'] == 4.0
    assert (variables['bot_x'], variables['bot_y'], variables['bot_z']) == (5.0, 70.0, -2.0)
    assert variables['bot_is_raining'] is True
    assert variables['bot_nearby_mobs'] == 1.0
    assert variables['bot_nearby_animals'] == 1.0
    assert variables['bot_inventory_count'] == 1.0
    assert variables['bot_inventory_slots_empty'] == 35.0
    assert variables['bot_inventory_full'] is False
    assert variables['bot_equipped_item'] == 'none'
    assert variables['bot_needs_food'] is True
    assert variables['bot_hunger_low'] is True
    assert variables['bot_health_low'] is False


def test_numbers_become_floats_and_none_is_skipped():
    variables = SystemSnapshot(health=20, is_night=False).to_variables()
    assert variables == {'bot_health': 20.0, 'bot_is_night': False}
    assert isinstance(variables['bot_health'], float)


def test_from_dict_ignores_unknown_keys():
    snapshot = SystemSnapshot.from_dict({'health': 3, 'mana': 9, 'position': {'x': 1, 'y': 2, 'z': 3}})
    assert snapshot.health == 3
    assert (snapshot.x, snapshot.y, snapshot.z) == (1, 2, 3)
