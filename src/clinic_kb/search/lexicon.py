"""Stopwords and synonym groups used by tokenization and query expansion.

The built-in table covers the clinic's English and Chinese FAQ corpora. A JSON
file with the same shape can replace it (see ``load_lexicon``):

    {"stopwords": ["the", "的"], "synonym_groups": [["implant", "种植牙"]]}

Every term is stored in normalized form so lookups compare like with like.
"""

import logging
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from clinic_kb.search.text import normalize

logger = logging.getLogger(__name__)

_STOPWORDS_EN: list[str] = [
    "a",
    "about",
    "after",
    "all",
    "also",
    "am",
    "an",
    "and",
    "any",
    "are",
    "as",
    "at",
    "be",
    "been",
    "before",
    "but",
    "by",
    "can",
    "could",
    "did",
    "do",
    "does",
    "doing",
    "for",
    "from",
    "get",
    "got",
    "had",
    "has",
    "have",
    "how",
    "i",
    "if",
    "in",
    "into",
    "is",
    "it",
    "its",
    "just",
    "know",
    "like",
    "me",
    "much",
    "my",
    "need",
    "no",
    "not",
    "of",
    "on",
    "or",
    "our",
    "please",
    "should",
    "so",
    "some",
    "tell",
    "than",
    "that",
    "the",
    "their",
    "them",
    "then",
    "there",
    "these",
    "they",
    "this",
    "to",
    "too",
    "up",
    "very",
    "want",
    "was",
    "we",
    "were",
    "what",
    "when",
    "where",
    "which",
    "who",
    "why",
    "will",
    "with",
    "would",
    "you",
    "your",
]

_STOPWORDS_ZH: list[str] = [
    "的",
    "了",
    "吗",
    "呢",
    "吧",
    "啊",
    "是",
    "在",
    "我",
    "你",
    "他",
    "她",
    "们",
    "和",
    "与",
    "及",
    "或",
    "也",
    "都",
    "就",
    "还",
    "请问",
    "想",
    "想要",
    "可以",
    "能",
    "能否",
    "怎么",
    "怎样",
    "如何",
    "什么",
    "哪里",
    "多少",
    "一下",
    "有",
    "没有",
    "这个",
    "那个",
    "需要",
]

# One concept per group; English names, abbreviations and Chinese translations.
_SYNONYM_GROUPS: list[list[str]] = [
    ["root canal", "root canal treatment", "endodontic", "endodontics", "rct", "根管", "根管治疗"],
    ["implant", "implants", "dental implant", "dental implants", "种植", "种植牙"],
    ["crown", "crowns", "dental crown", "cap", "牙冠", "烤瓷牙", "全瓷冠"],
    ["bridge", "dental bridge", "牙桥", "固定桥"],
    ["veneer", "veneers", "porcelain veneer", "贴面", "瓷贴面"],
    ["whitening", "teeth whitening", "bleaching", "美白", "牙齿美白", "冷光美白"],
    ["cleaning", "teeth cleaning", "scaling", "scale and polish", "prophylaxis", "洁牙", "洗牙", "洁治"],
    ["orthodontics", "orthodontic", "braces", "aligners", "invisalign", "正畸", "牙齿矫正", "矫正", "隐适美"],
    ["extraction", "tooth extraction", "pull tooth", "拔牙", "拔除"],
    ["wisdom tooth", "wisdom teeth", "third molar", "智齿", "智齿拔除"],
    ["filling", "fillings", "cavity", "cavities", "caries", "tooth decay", "补牙", "充填", "蛀牙", "龋齿"],
    ["gum disease", "periodontal", "periodontitis", "gingivitis", "牙周", "牙周病", "牙周炎", "牙龈炎"],
    ["denture", "dentures", "false teeth", "假牙", "义齿", "活动假牙"],
    ["toothache", "tooth pain", "dental pain", "牙痛", "牙疼"],
    ["sensitivity", "sensitive teeth", "tooth sensitivity", "牙齿敏感", "敏感"],
    ["x ray", "xray", "radiograph", "cbct", "x光", "牙片", "拍片"],
    ["checkup", "check up", "dental exam", "examination", "口腔检查", "检查"],
    ["pediatric", "children dentistry", "kids dentist", "儿童牙科", "儿牙", "小孩"],
    ["fluoride", "fluoride varnish", "涂氟", "氟化物"],
    ["sealant", "sealants", "fissure sealant", "窝沟封闭"],
    ["anesthesia", "anaesthesia", "local anesthetic", "numbing", "sedation", "麻醉", "局部麻醉"],
    ["emergency", "dental emergency", "urgent", "急诊", "紧急"],
    ["bad breath", "halitosis", "口臭", "口气"],
    ["mouth guard", "mouthguard", "night guard", "bruxism", "grinding", "咬合垫", "磨牙", "夜磨牙"],
]


class LexiconFile(BaseModel):
    """Shape of a lexicon override file. Missing keys use the built-in lists."""

    model_config = ConfigDict(extra="forbid")

    stopwords: list[str] = Field(default_factory=lambda: _STOPWORDS_EN + _STOPWORDS_ZH)
    synonym_groups: list[list[str]] = Field(default_factory=lambda: list(_SYNONYM_GROUPS))


@dataclass(frozen=True)
class Lexicon:
    """Immutable stopword set and synonym groups."""

    stopwords: frozenset[str]
    synonym_groups: tuple[frozenset[str], ...]

    @cached_property
    def domain_terms(self) -> frozenset[str]:
        """Every term that belongs to some synonym group."""
        return frozenset().union(*self.synonym_groups)


def build_lexicon(stopwords: list[str], synonym_groups: list[list[str]]) -> Lexicon:
    """Normalize raw terms into a Lexicon, dropping empty terms and groups."""
    groups: list[frozenset[str]] = []
    for group in synonym_groups:
        members = frozenset(t for t in (normalize(m) for m in group) if t)
        if members:
            groups.append(members)
    return Lexicon(
        stopwords=frozenset(t for t in (normalize(w) for w in stopwords) if t),
        synonym_groups=tuple(groups),
    )


DEFAULT_LEXICON = build_lexicon(_STOPWORDS_EN + _STOPWORDS_ZH, _SYNONYM_GROUPS)


def load_lexicon(path: Path | None = None) -> Lexicon:
    """Load a lexicon from a JSON file, or return the built-in table.

    Missing keys fall back to the built-in lists, so a file may override only
    the synonym groups or only the stopwords. A file of the wrong shape raises
    pydantic's ValidationError.
    """
    if path is None:
        return DEFAULT_LEXICON

    data = LexiconFile.model_validate_json(path.read_text(encoding="utf-8"))
    lexicon = build_lexicon(data.stopwords, data.synonym_groups)
    logger.info(
        "Loaded lexicon from %s: %d stopwords, %d synonym groups",
        path,
        len(lexicon.stopwords),
        len(lexicon.synonym_groups),
    )
    return lexicon
