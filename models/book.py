# models/book.py
from dataclasses import dataclass, field
from typing import Dict, FrozenSet

@dataclass(frozen=True)
class BookEntry:
    ordinal: int
    names: Dict[str, str]
    abbreviations: FrozenSet[str] = field(default_factory=frozenset)

    def name(self, language):
        return self.names[language]


def _book(ordinal, english, danish, *abbreviations):
    return BookEntry(
        ordinal=ordinal,
        names={'en': english, 'da': danish},
        abbreviations=frozenset(a.lower() for a in abbreviations),
    )


# Abbreviations are a shared pool: any of them resolves regardless of language
BOOKS = (
    _book(1, "Genesis", "1 Mosebog", "gen", "ge", "1 mos"),
    _book(2, "Exodus", "2 Mosebog", "ex", "exod", "2 mos"),
    _book(3, "Leviticus", "3 Mosebog", "lev", "le", "3 mos"),
    _book(4, "Numbers", "4 Mosebog", "num", "nu", "4 mos"),
    _book(5, "Deuteronomy", "5 Mosebog", "deut", "de", "5 mos"),
    _book(6, "Joshua", "Josua", "josh", "jos"),
    _book(7, "Judges", "Dommerbogen", "judg", "jg", "dom"),
    _book(8, "Ruth", "Ruths Bog", "ru", "rut"),
    _book(9, "1 Samuel", "1 Samuelsbog", "1sa", "1 sam"),
    _book(10, "2 Samuel", "2 Samuelsbog", "2sa", "2 sam"),
    _book(11, "1 Kings", "1 Kongebog", "1 kgs", "1ki", "1 kong"),
    _book(12, "2 Kings", "2 Kongebog", "2 kgs", "2ki", "2 kong"),
    _book(13, "1 Chronicles", "1 Krønikebog", "1 chron", "1ch", "1 krøn"),
    _book(14, "2 Chronicles", "2 Krønikebog", "2 chron", "2ch", "2 krøn"),
    _book(15, "Ezra", "Ezras Bog", "ezr"),
    _book(16, "Nehemiah", "Nehemias' Bog", "neh"),
    _book(17, "Esther", "Esters Bog", "esth", "est"),
    _book(18, "Job", "Jobs Bog", "jb"),
    _book(19, "Psalms", "Salmernes Bog", "psalm", "ps", "sl"),
    _book(20, "Proverbs", "Ordsprogenes Bog", "prov", "pr", "ordsp"),
    _book(21, "Ecclesiastes", "Prædikerens Bog", "eccl", "ec", "præd"),
    _book(22, "Song of Solomon", "Højsangen", "song of sol", "sos", "song", "højs"),
    _book(23, "Isaiah", "Esajas' Bog", "isa", "es"),
    _book(24, "Jeremiah", "Jeremias' Bog", "jer"),
    _book(25, "Lamentations", "Klagesangene", "lam", "klages"),
    _book(26, "Ezekiel", "Ezekiels Bog", "ezek", "eze", "ez"),
    _book(27, "Daniel", "Daniels Bog", "dan"),
    _book(28, "Hosea", "Hoseas' Bog", "hos"),
    _book(29, "Joel", "Joels Bog", "jl"),
    _book(30, "Amos", "Amos' Bog", "am"),
    _book(31, "Obadiah", "Obadias' Bog", "obad", "ob"),
    _book(32, "Jonah", "Jonas' Bog", "jon"),
    _book(33, "Micah", "Mikas Bog", "mic", "mik"),
    _book(34, "Nahum", "Nahums Bog", "nah"),
    _book(35, "Habakkuk", "Habakkuks Bog", "hab"),
    _book(36, "Zephaniah", "Sefanias' Bog", "zeph", "zep", "sef"),
    _book(37, "Haggai", "Haggajs Bog", "hag", "hagg"),
    _book(38, "Zechariah", "Zakarias' Bog", "zech", "zec", "zak"),
    _book(39, "Malachi", "Malakias' Bog", "mal"),
    _book(40, "Matthew", "Matthæusevangeliet", "mt", "matt", "mattæus"),
    _book(41, "Mark", "Markusevangeliet", "mrk", "mk"),
    _book(42, "Luke", "Lukasevangeliet", "lk", "luk"),
    _book(43, "John", "Johannesevangeliet", "jhn", "joh"),
    _book(44, "Acts", "Apostlenes Gerninger", "act", "apg"),
    _book(45, "Romans", "Romerbrevet", "ro", "rom"),
    _book(46, "1 Corinthians", "1 Korintherbrev", "1co", "1 cor", "1 kor"),
    _book(47, "2 Corinthians", "2 Korintherbrev", "2co", "2 cor", "2 kor"),
    _book(48, "Galatians", "Galaterbrevet", "gal"),
    _book(49, "Ephesians", "Efeserbrevet", "eph", "ef", "efeserne"),
    _book(50, "Philippians", "Filipperbrevet", "php", "phil", "flp"),
    _book(51, "Colossians", "Kolossenserbrevet", "col", "kol"),
    _book(52, "1 Thessalonians", "1 Thessalonikerbrev", "1th", "1 thess"),
    _book(53, "2 Thessalonians", "2 Thessalonikerbrev", "2th", "2 thess"),
    _book(54, "1 Timothy", "1 Timotheusbrev", "1ti", "1 tim"),
    _book(55, "2 Timothy", "2 Timotheusbrev", "2ti", "2 tim"),
    _book(56, "Titus", "Titusbrevet", "tit"),
    _book(57, "Philemon", "Filemonbrevet", "phm", "philem", "filem"),
    _book(58, "Hebrews", "Hebræerbrevet", "heb", "hebr"),
    _book(59, "James", "Jakobs Brev", "jmp", "jas", "jak"),
    _book(60, "1 Peter", "1 Peters Brev", "1pe", "1 pet"),
    _book(61, "2 Peter", "2 Peters Brev", "2pe", "2 pet"),
    _book(62, "1 John", "1 Johannes' Brev", "1jn", "1 joh"),
    _book(63, "2 John", "2 Johannes' Brev", "2jn", "2 joh"),
    _book(64, "3 John", "3 Johannes' Brev", "3jn", "3 joh"),
    _book(65, "Jude", "Judas' Brev", "jud"),
    _book(66, "Revelation", "Åbenbaringen", "rev", "re", "åb"),
)
