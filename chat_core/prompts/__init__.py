"""系统提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取提示词文本，
用于构造或补充 role="system" 的消息。
"""

from functools import lru_cache
from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(name: str, locale: str = "en") -> str:
    """读取 prompts/<locale>/<name>.md，去掉首尾空白后合并为一行。"""

    fname = PROMPTS_DIR / locale / f"{name}.md"
    return " ".join(fname.read_text(encoding="utf-8").split())


def formatting_instructions() -> str:
    """中转接口追加到 system 消息的格式要求。"""

    return load_prompt("formatting_instructions")


def assistant_persona() -> str:
    """默认助手人设（客户端前置的 system 消息）。"""

    return load_prompt("assistant_persona")
