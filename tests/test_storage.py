"""Tests for the AIS-via-MI observation lifecycle."""
import logging

import numpy as np
import pytest

from infostorage.errors import ConfigurationError, ParseError, StateError
from infostorage.information.gaussian import MutualInfoCalculatorGaussian
from infostorage.information.kraskov import MutualInfoCalculatorKraskov
from infostorage.information.storage import ActiveInfoStorageCalculatorViaMutualInfo


def _gaussian_calc(k=1, tau=1):
    calc = ActiveInfoStorageCalculatorViaMutualInfo(MutualInfoCalculatorGaussian())
    calc.initialise(k, tau)
    return calc


def test_ar1_matches_closed_form(ar1_process):
    """AIS(k=1) of AR(1) is -0.5 ln(1 - r^2), r the lag-1 correlation."""
    calc = _gaussian_calc(1, 1)
    calc.set_observations(ar1_process)
    ais = calc.compute_average_local_of_observations()
    r = np.corrcoef(ar1_process[:-1], ar1_process[1:])[0, 1]
    assert ais == pytest.approx(-0.5 * np.log(1 - r ** 2), rel=1e-6)
    assert calc.get_last_average() == ais


def test_num_observations_single_series(ar1_process):
    calc = _gaussian_calc(3, 2)
    calc.set_observations(ar1_process)
    assert calc.get_num_observations() == len(ar1_process) - 4 - 1


def test_local_values_padded_for_single_series(ar1_process):
    series = ar1_process[:300]
    calc = _gaussian_calc(2, 3)
    calc.set_observations(series)
    locals_ = calc.compute_local_of_previous_observations()
    assert locals_.shape == (300,)
    np.testing.assert_array_equal(locals_[:4], 0.0)
    assert np.mean(locals_[4:]) == pytest.approx(calc.get_last_average())


def test_multiple_series_concatenated(ar1_process):
    calc = _gaussian_calc(2, 1)
    calc.start_add_observations()
    calc.add_observations(ar1_process[:1000])
    calc.add_observations(ar1_process, start=1000, num=500)
    calc.finalise_add_observations()

    assert calc.get_num_observations() == (1000 - 2) + (500 - 2)
    assert calc.compute_local_of_previous_observations().shape == (1496,)


def test_short_series_skipped_with_warning(ar1_process, caplog):
    calc = _gaussian_calc(3, 1)
    calc.start_add_observations()
    calc.add_observations(ar1_process[:500])
    calc.add_observations(np.array([1.0, 2.0]))
    with caplog.at_level(logging.WARNING):
        calc.finalise_add_observations()

    assert calc.get_num_observations() == 500 - 3
    assert "too short" in caplog.text


def test_no_usable_series_is_state_error():
    calc = _gaussian_calc(5, 2)
    with pytest.raises(StateError):
        calc.set_observations(np.arange(5.0))


def test_calls_before_finalise_are_state_errors(ar1_process):
    calc = _gaussian_calc()
    with pytest.raises(StateError):
        calc.compute_average_local_of_observations()
    with pytest.raises(StateError):
        calc.add_observations(ar1_process)
    with pytest.raises(StateError):
        calc.finalise_add_observations()

    calc.start_add_observations()
    calc.add_observations(ar1_process)
    with pytest.raises(StateError):
        calc.get_num_observations()


def test_initialise_discards_observations(ar1_process):
    calc = _gaussian_calc()
    calc.set_observations(ar1_process)
    calc.initialise()
    with pytest.raises(StateError):
        calc.compute_average_local_of_observations()


def test_add_observations_slice_out_of_range(ar1_process):
    calc = _gaussian_calc()
    calc.start_add_observations()
    with pytest.raises(ValueError):
        calc.add_observations(ar1_process[:100], start=50, num=100)


def test_embedding_properties():
    calc = _gaussian_calc()
    calc.set_property("k_HISTORY", "4")
    calc.set_property("tau", 2)
    assert (calc.k, calc.tau) == (4, 2)
    assert calc.get_property("K_HISTORY") == "4"
    assert calc.get_property("TAU") == "2"

    with pytest.raises(ParseError):
        calc.set_property("k_HISTORY", "four")
    with pytest.raises(ParseError):
        calc.initialise(k=0)


def test_time_diff_refused():
    calc = _gaussian_calc()
    with pytest.raises(ConfigurationError):
        calc.set_property("TIME_DIFF", "1")
    assert calc.get_property("TIME_DIFF") == "0"


def test_other_properties_reach_estimator():
    calc = _gaussian_calc()
    calc.set_property("BIAS_CORRECTION", "true")
    assert calc.get_property("BIAS_CORRECTION") == "true"
    assert calc.get_property("UNKNOWN") is None


def test_significance_needs_analytic_estimator(ar1_process):
    calc = ActiveInfoStorageCalculatorViaMutualInfo(MutualInfoCalculatorKraskov())
    calc.initialise(1, 1)
    calc.set_observations(ar1_process[:500])
    with pytest.raises(ConfigurationError):
        calc.compute_significance()


def test_kraskov_backed_calculator(ar1_process):
    calc = ActiveInfoStorageCalculatorViaMutualInfo(MutualInfoCalculatorKraskov())
    calc.initialise(1, 1)
    calc.set_observations(ar1_process[:2000])
    assert calc.compute_average_local_of_observations() == pytest.approx(
        -0.5 * np.log(1 - 0.36), abs=0.08)
