"""
Статистика обхода входного каталога.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional


class WalkStats:
    """Класс для хранения статистики обхода.

    Счетчики изменяются из рабочих потоков, поэтому все изменения идут
    через методы record_* под блокировкой.
    """

    def __init__(self):
        self.processed_files = 0
        self.skipped_unparsed = 0
        self.skipped_out_of_range = 0
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.errors: List[Dict] = []
        self._lock = threading.Lock()

    @property
    def failed_files(self) -> int:
        return len(self.errors)

    @property
    def skipped_files(self) -> int:
        return self.skipped_unparsed + self.skipped_out_of_range

    def record_processed(self) -> None:
        with self._lock:
            self.processed_files += 1

    def record_unparsed(self) -> None:
        with self._lock:
            self.skipped_unparsed += 1

    def record_out_of_range(self) -> None:
        with self._lock:
            self.skipped_out_of_range += 1

    def record_failure(self, file_path: Path, error: Exception) -> None:
        """Добавляет ошибку обработки файла в список."""
        with self._lock:
            self.errors.append({
                'file': str(file_path),
                'error': str(error),
                'timestamp': datetime.now()
            })

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность обхода в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'processed_files': self.processed_files,
            'skipped_unparsed': self.skipped_unparsed,
            'skipped_out_of_range': self.skipped_out_of_range,
            'failed_files': self.failed_files,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration(),
        }
