"""상관 계산 설정 저장/불러오기"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

_logger = logging.getLogger(__name__)


class CorrelationSettings:
    """상관/상호상관 파라미터 관리"""

    DEFAULT_SETTINGS = {
        # 커널 상관
        'method': 'spatial',

        # 상호상관 (변위 추정)
        'search_width': 11,
        'search_height': 11,
        'window_width': 9,
        'window_height': 9,
        'windowing': 'none',
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        if config_path is None:
            config_path = Path.home() / '.corrfield' / 'settings.json'
        self.config_path = Path(config_path)

        self.settings = self.DEFAULT_SETTINGS.copy()
        self.load()

    def load(self):
        """설정 파일 로드 (없으면 기본값 유지)"""
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    saved = json.load(f)
                self.settings.update(saved)
                _logger.info(f"설정 로드: {self.config_path}")
        except (OSError, ValueError) as e:
            _logger.warning(f"설정 로드 실패: {e}")

    def save(self):
        """설정 파일 저장"""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2, ensure_ascii=False)
            _logger.info(f"설정 저장: {self.config_path}")
        except OSError as e:
            _logger.warning(f"설정 저장 실패: {e}")

    def get(self, key: str, default=None):
        return self.settings.get(key, default)

    def set(self, key: str, value):
        self.settings[key] = value

    def update(self, params: Dict[str, Any]):
        self.settings.update(params)

    def get_correlation_params(self) -> Dict[str, Any]:
        """correlate() 키워드 인자"""
        return {'method': self.settings.get('method')}

    def get_crosscorrelation_params(self) -> Dict[str, Any]:
        """crosscorrelate() 키워드 인자"""
        keys = ['search_width', 'search_height', 'window_width',
                'window_height', 'windowing']
        return {k: self.settings.get(k) for k in keys}
