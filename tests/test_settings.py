"""설정 관리 테스트"""

import json
import logging
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from corrfield import (
    CorrelationSettings, DataField, correlate, crosscorrelate, setup_logger, set_log_level,
)


def test_defaults_without_file(tmp_path):
    settings = CorrelationSettings(tmp_path / 'settings.json')
    assert settings.get('method') == 'spatial'
    assert settings.get_crosscorrelation_params() == {
        'search_width': 11,
        'search_height': 11,
        'window_width': 9,
        'window_height': 9,
        'windowing': 'none',
    }


def test_save_and_load_roundtrip(tmp_path):
    path = tmp_path / 'nested' / 'settings.json'
    settings = CorrelationSettings(path)
    settings.update({'window_width': 5, 'windowing': 'hann'})
    settings.set('method', 'poc')
    settings.save()

    reloaded = CorrelationSettings(path)
    assert reloaded.get('window_width') == 5
    assert reloaded.get('windowing') == 'hann'
    assert reloaded.get_correlation_params() == {'method': 'poc'}


def test_broken_file_keeps_defaults(tmp_path, caplog):
    path = tmp_path / 'settings.json'
    path.write_text('{not json', encoding='utf-8')
    with caplog.at_level(logging.WARNING, logger='corrfield'):
        settings = CorrelationSettings(path)
    assert settings.get('search_width') == 11
    assert any('설정 로드 실패' in r.message for r in caplog.records)


def test_params_drive_computation(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'search_width': 3, 'search_height': 3,
                                'window_width': 5, 'window_height': 5,
                                'method': 'fft'}), encoding='utf-8')
    settings = CorrelationSettings(path)

    rng = np.random.default_rng(0)
    field = DataField(rng.normal(size=(16, 16)))
    result = crosscorrelate(field, field, **settings.get_crosscorrelation_params())
    assert result.window_width == 5
    assert result.n_points == 12 * 12

    score = correlate(field, field, **settings.get_correlation_params())
    assert np.unravel_index(np.argmax(score.data), score.data.shape) == (8, 8)


def test_setup_logger_is_idempotent():
    first = setup_logger()
    n_handlers = len(first.handlers)
    second = setup_logger()
    assert first is second
    assert len(second.handlers) == n_handlers


def test_setup_logger_writes_dated_file(tmp_path):
    log = setup_logger('corrfield.filetest', log_dir=tmp_path / 'logs')
    log.info('파일 핸들러 확인')
    for handler in log.handlers:
        handler.flush()
    files = list((tmp_path / 'logs').glob('corrfield.filetest_*.log'))
    assert len(files) == 1
    assert '파일 핸들러 확인' in files[0].read_text(encoding='utf-8')
    for handler in list(log.handlers):
        handler.close()
        log.removeHandler(handler)


def test_set_log_level():
    log = setup_logger()
    previous = log.level
    set_log_level(logging.DEBUG)
    assert log.level == logging.DEBUG
    set_log_level(previous)
