"""로깅 설정 모듈"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str = "corrfield",
                 level: int = logging.INFO,
                 log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    패키지 로거 설정 (이미 핸들러가 있으면 그대로 반환)

    Args:
        name: 로거 이름. 하위 모듈 로거(corrfield.core.*)가 여기로 전파
        level: 로깅 레벨
        log_dir: 지정 시 날짜별 로그 파일도 기록
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            log_dir / f"{name}_{datetime.now():%Y%m%d}.log",
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_log_level(level: int, name: str = "corrfield"):
    """반복 계산 디버깅 시 DEBUG로 낮춰 상태 전이 로그 확인"""
    logging.getLogger(name).setLevel(level)


logger = setup_logger()
