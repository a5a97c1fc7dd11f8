from snow_cat.models import DaySample, ForecastSnapshot, HourSample
from snow_cat.services.mood import Mood
from snow_cat.state import (
    AppState,
    ForecastFailed,
    ForecastLoaded,
    LoadStatus,
    OffsetSelected,
    ResortSelected,
    available_offsets,
    update,
)


def powder_tomorrow_forecast():
    """Snow tomorrow afternoon, dry after that."""
    hourly = [HourSample(timestamp=i * 3600, snow_one_hour=20.0 if i == 40 else None) for i in range(120)]
    daily = [DaySample(temperature_max=-5.0, temperature_min=-10.0) for _ in range(5)]
    return ForecastSnapshot.build(hourly, daily)


def loaded_state():
    state = update(AppState(), ResortSelected("Vail"))
    return update(state, ForecastLoaded(powder_tomorrow_forecast(), resort="Vail"))


def test_select_resort_starts_loading():
    state = update(AppState(offset=2, mood=Mood.CARVING), ResortSelected("Vail"))

    assert state.resort == "Vail"
    assert state.status is LoadStatus.LOADING
    assert state.offset == 0
    assert state.forecast is None
    assert state.mood is None


def test_forecast_loaded_classifies_current_offset():
    state = loaded_state()

    assert state.status is LoadStatus.READY
    assert state.mood is Mood.JUMPING
    assert list(available_offsets(state)) == [0, 1, 2, 3, 4]


def test_offset_selection_reclassifies():
    state = loaded_state()

    later = update(state, OffsetSelected(3))

    assert later.offset == 3
    assert later.mood is Mood.CARVING
    assert state.offset == 0
    assert state.mood is Mood.JUMPING


def test_offset_outside_forecast_is_ignored():
    state = loaded_state()

    assert update(state, OffsetSelected(5)) is state
    assert update(state, OffsetSelected(-1)) is state


def test_offset_before_forecast_is_kept_for_later():
    state = update(AppState(resort="Vail", status=LoadStatus.LOADING), OffsetSelected(4))

    assert state.offset == 4
    assert state.mood is None

    loaded = update(state, ForecastLoaded(powder_tomorrow_forecast()))
    assert loaded.offset == 4
    assert loaded.mood is Mood.CARVING


def test_shorter_forecast_resets_offset():
    state = AppState(resort="Vail", offset=3, status=LoadStatus.LOADING)
    short = ForecastSnapshot.build([], [DaySample(temperature_max=0.0)])

    loaded = update(state, ForecastLoaded(short))

    assert loaded.offset == 0
    assert loaded.mood is Mood.CARVING


def test_fetch_failure_sets_error():
    state = update(loaded_state(), ForecastFailed("Weather API error: Unauthorized", resort="Vail"))

    assert state.status is LoadStatus.ERROR
    assert state.error == "Weather API error: Unauthorized"
    assert state.forecast is None
    assert state.mood is None


def test_responses_for_another_resort_are_dropped():
    state = update(loaded_state(), ResortSelected("Kirkwood"))

    assert update(state, ForecastLoaded(powder_tomorrow_forecast(), resort="Vail")) is state
    assert update(state, ForecastFailed("timeout", resort="Vail")) is state
