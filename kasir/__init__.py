"""
Warung Kasir - 주문 접수 및 실시간 알림 백엔드
"""
__version__ = "1.0.0"
