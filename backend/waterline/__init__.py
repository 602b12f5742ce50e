"""
Waterline：Gerstner 波浪场、浮力与水面交互事件的模拟后端。
"""

__version__ = "0.1.0"
