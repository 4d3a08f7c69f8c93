"""
English inflection helpers used to derive names from one another: codec
identifiers from format names, resource paths from class names, and
association target classes from association names.

Acronyms registered on an :py:class:`Inflector` are honored in both
directions, so that ``camelize("json")`` yields ``"JSON"`` and
``underscore("JSONFormat")`` yields ``"json_format"``.
"""

import re
import typing

Rule = typing.Tuple[typing.Pattern[str], str]

_LAST_WORD_RE = re.compile(r"[A-Za-z]+$")


class Inflector:
    plurals: typing.List[Rule]
    singulars: typing.List[Rule]
    uncountables: typing.Set[str]
    _acronyms: typing.Dict[str, str]
    _acronym_regex: typing.Optional[str]
    _to_plural: typing.Dict[str, str]
    _to_singular: typing.Dict[str, str]

    @property
    def acronyms(self) -> typing.Mapping[str, str]:
        return self._acronyms

    def acronym(self, word: str) -> None:
        """
        Registers ``word`` as an acronym.  The casing given here is the one
        :py:meth:`camelize` produces for it.
        """
        self._acronyms[word.lower()] = word
        self._acronym_regex = "|".join(
            re.escape(a) for a in sorted(self._acronyms.values(), key=len, reverse=True)
        )

    def plural(self, rule: str, replacement: str) -> None:
        self.uncountables.discard(replacement.lower())
        self.plurals.insert(0, (re.compile(rule, re.IGNORECASE), replacement))

    def singular(self, rule: str, replacement: str) -> None:
        self.uncountables.discard(replacement.lower())
        self.singulars.insert(0, (re.compile(rule, re.IGNORECASE), replacement))

    def irregular(self, singular: str, plural: str) -> None:
        singular, plural = singular.lower(), plural.lower()
        self.uncountables.discard(singular)
        self.uncountables.discard(plural)
        self._to_plural[singular] = plural
        self._to_plural[plural] = plural
        self._to_singular[plural] = singular
        self._to_singular[singular] = singular

    def uncountable(self, *words: str) -> None:
        self.uncountables.update(w.lower() for w in words)

    def _apply_inflections(
        self, word: str, rules: typing.Sequence[Rule], irregulars: typing.Mapping[str, str]
    ) -> str:
        if not word:
            return word
        m = _LAST_WORD_RE.search(word)
        if m is not None:
            last = m.group(0)
            if last.lower() in self.uncountables:
                return word
            replacement = irregulars.get(last.lower())
            if replacement is not None:
                return word[: m.start()] + last[0] + replacement[1:]
        for pattern, substitution in rules:
            if pattern.search(word):
                return pattern.sub(substitution, word, count=1)
        return word

    def pluralize(self, word: str) -> str:
        return self._apply_inflections(word, self.plurals, self._to_plural)

    def singularize(self, word: str) -> str:
        return self._apply_inflections(word, self.singulars, self._to_singular)

    def camelize(self, term: str, uppercase_first: bool = True) -> str:
        string = str(term)
        if uppercase_first:
            string = re.sub(
                r"^[a-z\d]*",
                lambda m: self._acronyms.get(m.group(0), m.group(0).capitalize()),
                string,
            )
        else:
            if self._acronym_regex:
                pattern = rf"^(?:(?:{self._acronym_regex})(?=\b|[A-Z_])|\w)"
            else:
                pattern = r"^\w"
            string = re.sub(pattern, lambda m: m.group(0).lower(), string)
        string = re.sub(
            r"(?:_|(/))([a-z\d]*)",
            lambda m: (m.group(1) or "")
            + self._acronyms.get(m.group(2).lower(), m.group(2).capitalize()),
            string,
            flags=re.IGNORECASE,
        )
        return string.replace("/", ".")

    def underscore(self, camel_cased_word: str) -> str:
        word = str(camel_cased_word)
        if not re.search(r"[A-Z-]|\.", word):
            return word
        word = word.replace(".", "/")
        if self._acronym_regex:
            word = re.sub(
                rf"(?:(?<=([A-Za-z\d]))|\b)({self._acronym_regex})(?=\b|[^a-z])",
                lambda m: ("_" if m.group(1) else "") + m.group(2).lower(),
                word,
            )
        word = re.sub(
            r"([A-Z]+)(?=[A-Z][a-z])|([a-z\d])(?=[A-Z])",
            lambda m: (m.group(1) or m.group(2)) + "_",
            word,
        )
        return word.replace("-", "_").lower()

    def classify(self, name: str) -> str:
        return self.camelize(self.singularize(re.sub(r".*\.", "", str(name))))

    def demodulize(self, path: str) -> str:
        return str(path).rsplit(".", 1)[-1]

    def dasherize(self, word: str) -> str:
        return str(word).replace("_", "-")

    def foreign_key(self, class_name: str) -> str:
        return self.underscore(self.demodulize(class_name)) + "_id"

    @classmethod
    def with_defaults(cls) -> "Inflector":
        inflector = cls()
        for rule, replacement in _DEFAULT_PLURALS:
            inflector.plural(rule, replacement)
        for rule, replacement in _DEFAULT_SINGULARS:
            inflector.singular(rule, replacement)
        for singular, plural in _DEFAULT_IRREGULARS:
            inflector.irregular(singular, plural)
        inflector.uncountable(*_DEFAULT_UNCOUNTABLES)
        for acronym in _DEFAULT_ACRONYMS:
            inflector.acronym(acronym)
        return inflector

    def __init__(self) -> None:
        self.plurals = []
        self.singulars = []
        self.uncountables = set()
        self._acronyms = {}
        self._acronym_regex = None
        self._to_plural = {}
        self._to_singular = {}


# Later rules take precedence over earlier ones.
_DEFAULT_PLURALS: typing.Sequence[typing.Tuple[str, str]] = (
    (r"$", "s"),
    (r"s$", "s"),
    (r"^(ax|test)is$", r"\1es"),
    (r"(octop|vir)us$", r"\1i"),
    (r"(octop|vir)i$", r"\1i"),
    (r"(alias|status)$", r"\1es"),
    (r"(bu)s$", r"\1ses"),
    (r"(buffal|tomat)o$", r"\1oes"),
    (r"([ti])um$", r"\1a"),
    (r"([ti])a$", r"\1a"),
    (r"sis$", "ses"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"(hive)$", r"\1s"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(x|ch|ss|sh)$", r"\1es"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"^(m|l)ouse$", r"\1ice"),
    (r"^(m|l)ice$", r"\1ice"),
    (r"^(ox)$", r"\1en"),
    (r"^(oxen)$", r"\1"),
    (r"(quiz)$", r"\1zes"),
)

_DEFAULT_SINGULARS: typing.Sequence[typing.Tuple[str, str]] = (
    (r"s$", ""),
    (r"(ss)$", r"\1"),
    (r"(n)ews$", r"\1ews"),
    (r"([ti])a$", r"\1um"),
    (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
    (r"(^analy)(sis|ses)$", r"\1sis"),
    (r"([^f])ves$", r"\1fe"),
    (r"(hive)s$", r"\1"),
    (r"(tive)s$", r"\1"),
    (r"([lr])ves$", r"\1f"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"(s)eries$", r"\1eries"),
    (r"(m)ovies$", r"\1ovie"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"^(m|l)ice$", r"\1ouse"),
    (r"(bus)(es)?$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(shoe)s$", r"\1"),
    (r"(cris|test)(is|es)$", r"\1is"),
    (r"^(a)x[ie]s$", r"\1xis"),
    (r"(octop|vir)(us|i)$", r"\1us"),
    (r"(alias|status)(es)?$", r"\1"),
    (r"^(ox)en", r"\1"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(matr)ices$", r"\1ix"),
    (r"(quiz)zes$", r"\1"),
    (r"(database)s$", r"\1"),
)

_DEFAULT_IRREGULARS: typing.Sequence[typing.Tuple[str, str]] = (
    ("person", "people"),
    ("man", "men"),
    ("child", "children"),
    ("sex", "sexes"),
    ("move", "moves"),
    ("zombie", "zombies"),
)

_DEFAULT_UNCOUNTABLES: typing.Sequence[str] = (
    "equipment",
    "information",
    "rice",
    "money",
    "species",
    "series",
    "fish",
    "sheep",
    "jeans",
    "police",
)

_DEFAULT_ACRONYMS: typing.Sequence[str] = ("JSON", "XML")

inflector = Inflector.with_defaults()


def camelize(term: str, uppercase_first: bool = True) -> str:
    return inflector.camelize(term, uppercase_first)


def underscore(camel_cased_word: str) -> str:
    return inflector.underscore(camel_cased_word)


def pluralize(word: str) -> str:
    return inflector.pluralize(word)


def singularize(word: str) -> str:
    return inflector.singularize(word)


def classify(name: str) -> str:
    return inflector.classify(name)


def demodulize(path: str) -> str:
    return inflector.demodulize(path)


def dasherize(word: str) -> str:
    return inflector.dasherize(word)


def foreign_key(class_name: str) -> str:
    return inflector.foreign_key(class_name)
