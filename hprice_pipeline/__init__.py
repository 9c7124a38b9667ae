"""
hprice-pipeline

房价预测训练 pipeline 编排器：数据清洗、特征工程、模型训练。
"""

__version__ = "0.1.0"
