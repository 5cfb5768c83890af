"""
English reference data for plaintext scoring.

Frequencies are percentages of all n-grams in a large English corpus.
Everything here is read-only and shared by every worker.
"""

ENGLISH_IC = 0.0667

ENGLISH_FREQ: dict[str, float] = {
    "E": 12.70, "T": 9.06, "A": 8.17, "O": 7.51, "I": 6.97,
    "N": 6.75, "S": 6.33, "H": 6.09, "R": 5.99, "D": 4.25,
    "L": 4.03, "C": 2.78, "U": 2.76, "M": 2.41, "W": 2.36,
    "F": 2.23, "G": 2.02, "Y": 1.97, "P": 1.93, "B": 1.29,
    "V": 0.98, "K": 0.77, "J": 0.15, "X": 0.15, "Q": 0.10,
    "Z": 0.07,
}

BIGRAM_FREQ: dict[str, float] = {
    "TH": 3.56, "HE": 3.07, "IN": 2.43, "ER": 2.05, "AN": 1.99,
    "RE": 1.85, "ON": 1.76, "AT": 1.49, "EN": 1.45, "ND": 1.35,
    "TI": 1.34, "ES": 1.34, "OR": 1.28, "TE": 1.20, "OF": 1.17,
    "ED": 1.17, "IS": 1.13, "IT": 1.12, "AL": 1.09, "AR": 1.07,
    "ST": 1.05, "TO": 1.04, "NT": 1.04, "NG": 0.95, "SE": 0.93,
    "HA": 0.93, "AS": 0.87, "OU": 0.87, "IO": 0.83, "LE": 0.83,
    "VE": 0.83, "CO": 0.79, "ME": 0.79, "DE": 0.76, "HI": 0.76,
    "RI": 0.73, "RO": 0.73, "IC": 0.70, "NE": 0.69, "EA": 0.69,
    "RA": 0.69, "CE": 0.65, "LI": 0.62, "CH": 0.60, "LL": 0.58,
    "BE": 0.58, "MA": 0.57, "SI": 0.55, "OM": 0.55, "UR": 0.54,
    "CA": 0.54, "EL": 0.53, "TA": 0.53, "LA": 0.53, "NS": 0.51,
    "DI": 0.50, "FO": 0.50, "HO": 0.50, "PE": 0.49, "EC": 0.49,
    "PR": 0.48, "NO": 0.47, "CT": 0.46, "US": 0.46, "AC": 0.45,
    "OT": 0.45, "IL": 0.43, "TR": 0.43, "LY": 0.42, "NC": 0.42,
    "ET": 0.41, "UT": 0.41, "SS": 0.41, "SO": 0.40, "RS": 0.40,
    "UN": 0.39, "LO": 0.39, "WA": 0.38, "GE": 0.38, "IE": 0.38,
    "WH": 0.38, "EE": 0.38, "WI": 0.37, "EM": 0.37, "AD": 0.37,
    "OL": 0.36, "RT": 0.36, "PO": 0.35, "WE": 0.35, "NA": 0.35,
    "UL": 0.35, "NI": 0.34, "TS": 0.34, "MO": 0.33, "OW": 0.33,
    "PA": 0.32, "IM": 0.32, "MI": 0.32, "AI": 0.32, "SH": 0.31,
}

TRIGRAM_FREQ: dict[str, float] = {
    "THE": 1.81, "AND": 0.73, "ING": 0.72, "ENT": 0.42, "ION": 0.42,
    "HER": 0.36, "FOR": 0.34, "THA": 0.33, "NTH": 0.33, "INT": 0.32,
    "ERE": 0.31, "TIO": 0.31, "TER": 0.30, "EST": 0.28, "ERS": 0.28,
    "ATI": 0.26, "HAT": 0.26, "ATE": 0.25, "ALL": 0.25, "ETH": 0.24,
    "HES": 0.24, "VER": 0.24, "HIS": 0.24, "OFT": 0.22, "ITH": 0.21,
    "FTH": 0.21, "STH": 0.21, "OTH": 0.21, "RES": 0.21, "ONT": 0.20,
    "DTH": 0.20, "ARE": 0.20, "REA": 0.20, "EAR": 0.19, "WAS": 0.19,
    "SIN": 0.18, "STO": 0.18, "TTH": 0.18, "STA": 0.18, "THI": 0.18,
    "TIN": 0.18, "TED": 0.17, "ONS": 0.17, "EDT": 0.17, "WIT": 0.17,
    "SAN": 0.17, "DIN": 0.16, "ORT": 0.16, "CON": 0.16, "RTH": 0.16,
    "EVE": 0.16, "HEC": 0.15, "ESE": 0.15, "MEN": 0.15, "EOF": 0.15,
    "NCE": 0.15, "ECO": 0.15, "OUR": 0.14, "YOU": 0.14, "NOT": 0.14,
}

QUADGRAM_FREQ: dict[str, float] = {
    "TION": 0.31, "NTHE": 0.27, "THER": 0.24, "THAT": 0.21, "OFTH": 0.19,
    "FTHE": 0.19, "THES": 0.18, "WITH": 0.18, "INTH": 0.17, "ATIO": 0.17,
    "OTHE": 0.16, "TTHE": 0.16, "DTHE": 0.15, "INGT": 0.15, "ETHE": 0.15,
    "SAND": 0.14, "STHE": 0.14, "HERE": 0.13, "THEC": 0.13, "MENT": 0.12,
    "THEM": 0.12, "RTHE": 0.12, "THEP": 0.11, "FROM": 0.11, "THIS": 0.11,
    "TING": 0.11, "THEI": 0.10, "NGTH": 0.10, "IGHT": 0.10, "OUGH": 0.10,
    "ANDT": 0.10, "EDTH": 0.10, "HAVE": 0.09, "ETHA": 0.09, "NDTH": 0.09,
    "ONTH": 0.09, "ENTH": 0.09, "EAND": 0.09, "ATTH": 0.09, "THEA": 0.09,
    "HATT": 0.08, "ANCE": 0.08, "ENCE": 0.08, "OULD": 0.08, "WHIC": 0.08,
    "HICH": 0.08, "INGA": 0.08, "TOTH": 0.08, "ERTH": 0.08, "EVER": 0.08,
}

NGRAM_FREQUENCIES: dict[int, dict[str, float]] = {
    2: BIGRAM_FREQ,
    3: TRIGRAM_FREQ,
    4: QUADGRAM_FREQ,
}

# The 30 most frequent English bigrams, used for the word heuristic.
COMMON_BIGRAMS: frozenset[str] = frozenset({
    "TH", "HE", "IN", "EN", "NT", "RE", "ER", "AN", "TI", "ES",
    "ON", "AT", "SE", "ND", "OR", "AR", "AL", "TE", "CO", "DE",
    "TO", "RA", "ET", "ED", "IT", "SA", "EM", "RO", "HA", "VE",
})

TWO_LETTER_WORDS: frozenset[str] = frozenset({
    "OF", "TO", "IN", "IT", "IS", "BE", "AS", "AT", "SO", "WE",
    "HE", "BY", "OR", "ON", "DO", "IF", "ME", "MY", "UP", "AN",
    "GO", "NO", "US", "AM",
})

THREE_LETTER_WORDS: frozenset[str] = frozenset({
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "ANY", "CAN",
    "HAD", "HER", "WAS", "ONE", "OUR", "OUT", "DAY", "GET", "HAS", "HIM",
    "HIS", "HOW", "ITS", "MAY", "NEW", "NOW", "OLD", "SEE", "TWO", "WAY",
    "WHO", "DID", "LET", "PUT", "SAY", "SHE", "TOO", "USE",
})

TOP_WORDS: frozenset[str] = frozenset({
    "THAT", "WITH", "HAVE", "THIS", "WILL", "YOUR", "FROM", "THEY",
    "BEEN", "MANY", "SOME", "THEM", "THEN", "THESE", "WOULD", "MAKE",
    "LIKE", "INTO", "TIME", "VERY", "WHEN", "COME", "COULD", "MORE",
    "THAN", "FIRST", "OTHER", "PEOPLE", "ABOUT", "THEIR", "THERE", "WHICH",
})

# Adjacent letter pairs that practically never occur in English text.
IMPOSSIBLE_BIGRAMS: frozenset[str] = frozenset({
    "BQ", "BX", "CJ", "CX", "DX", "FQ", "FX", "GQ", "GX", "HX",
    "JC", "JF", "JG", "JQ", "JV", "JW", "JX", "JZ", "KQ", "KX",
    "KZ", "MX", "PX", "PZ", "QB", "QC", "QD", "QF", "QG", "QH",
    "QJ", "QK", "QL", "QM", "QN", "QP", "QV", "QW", "QX", "QY",
    "QZ", "SX", "VB", "VF", "VJ", "VK", "VM", "VP", "VQ", "VW",
    "VX", "WQ", "WX", "XJ", "XK", "XZ", "YQ", "ZJ", "ZQ", "ZX",
})
