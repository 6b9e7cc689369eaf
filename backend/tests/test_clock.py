from tilematch.services.games.clock import Clock, format_time, time_breakdown
from tilematch.services.games.scheduler import ManualScheduler


def make_clock(tick_interval=1.0):
    scheduler = ManualScheduler()
    ticks = []
    clock = Clock(scheduler, tick_interval=tick_interval, on_tick=ticks.append)
    return scheduler, clock, ticks


def test_paused_interval_contributes_nothing():
    scheduler, clock, _ = make_clock()
    clock.start()
    scheduler.advance_ms(2000)
    clock.pause()
    scheduler.advance_ms(1000)
    assert clock.elapsed_seconds == 2
    clock.resume()
    scheduler.advance_ms(1000)
    assert clock.elapsed_seconds == 3


def test_start_from_paused_resumes_without_loss():
    scheduler, clock, _ = make_clock()
    clock.start()
    scheduler.advance(5)
    clock.pause()
    clock.start()
    scheduler.advance(2)
    assert clock.elapsed_seconds == 7


def test_start_while_running_is_noop():
    scheduler, clock, _ = make_clock()
    clock.start()
    scheduler.advance(3)
    clock.start()
    scheduler.advance(1)
    assert clock.elapsed_seconds == 4


def test_pause_is_noop_from_idle_and_paused():
    scheduler, clock, _ = make_clock()
    clock.pause()
    assert clock.status == 'idle'
    clock.start()
    scheduler.advance(1)
    clock.pause()
    clock.pause()
    assert clock.status == 'paused'
    assert clock.elapsed_seconds == 1


def test_resume_only_from_paused():
    scheduler, clock, _ = make_clock()
    clock.resume()
    assert clock.status == 'idle'
    scheduler.advance(10)
    assert clock.elapsed_seconds == 0


def test_reset_discards_time():
    scheduler, clock, _ = make_clock()
    clock.start()
    scheduler.advance(42)
    clock.reset()
    assert clock.status == 'idle'
    assert clock.elapsed_seconds == 0
    clock.start()
    scheduler.advance(1)
    assert clock.elapsed_seconds == 1


def test_stop_freezes_until_reset():
    scheduler, clock, _ = make_clock()
    clock.start()
    scheduler.advance(4)
    clock.stop()
    clock.start()
    scheduler.advance(10)
    assert clock.elapsed_seconds == 4
    assert clock.status == 'stopped'
    clock.reset()
    assert clock.elapsed_seconds == 0


def test_elapsed_uses_wall_clock_not_tick_count():
    # one tick per 10s, but elapsed still tracks the scheduler clock
    scheduler, clock, ticks = make_clock(tick_interval=10)
    clock.start()
    scheduler.advance(3.5)
    assert ticks == []
    assert clock.elapsed_seconds == 3
    scheduler.advance(7)
    assert ticks == [10]
    assert clock.elapsed_seconds == 10


def test_ticks_report_elapsed_and_stop_when_paused():
    scheduler, clock, ticks = make_clock()
    clock.start()
    scheduler.advance(3)
    assert ticks == [1, 2, 3]
    clock.pause()
    scheduler.advance(5)
    assert ticks == [1, 2, 3]


def test_dispose_cancels_ticks():
    scheduler, clock, ticks = make_clock()
    clock.start()
    scheduler.advance(1)
    clock.dispose()
    scheduler.advance(5)
    assert ticks == [1]
    assert scheduler.pending() == 0
    clock.start()
    assert clock.status != 'running'


def test_state_snapshot_flags():
    scheduler, clock, _ = make_clock()
    assert clock.state.running is False and clock.state.paused is False
    clock.start()
    assert clock.state.running is True and clock.state.paused is False
    clock.pause()
    assert clock.state.running is False and clock.state.paused is True


def test_format_time():
    assert format_time(0) == '00:00'
    assert format_time(75) == '01:15'
    assert format_time(3661) == '61:01'


def test_time_breakdown():
    assert time_breakdown(3661) == {'hours': 1, 'minutes': 1, 'seconds': 1, 'total': 3661}
    assert time_breakdown(59) == {'hours': 0, 'minutes': 0, 'seconds': 59, 'total': 59}
