"""にゃるほど（CatUp）：多頭飼い世帯のお世話キャッチアップ。"""
__version__ = "0.1.0"
