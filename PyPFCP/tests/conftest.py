# 文件: PyPFCP/tests/conftest.py
"""
pytest 配置

将 PyPFCP/ 加入 sys.path，未安装时也可直接 import pfcp。
"""

import os
import sys

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if project_root not in sys.path:
    sys.path.insert(0, project_root)
