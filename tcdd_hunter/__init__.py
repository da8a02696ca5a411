"""TCDD 좌석 헌터: TCDD 빈 좌석 감지 및 자동 홀드"""

__version__ = "1.0.0"
