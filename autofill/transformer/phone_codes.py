# ITU country calling code -> valid national significant number lengths.
# Only codes whose lengths are reasonably fixed are listed; anything else goes
# through the length heuristics in phone.py.
COUNTRY_CODES = {
    # 1 digit
    "1": {10},
    "7": {10},
    # 2 digits
    "20": {9, 10},
    "27": {9},
    "30": {10},
    "31": {9},
    "32": {8, 9},
    "33": {9},
    "34": {9},
    "36": {8, 9},
    "39": {9, 10},
    "40": {9},
    "41": {9},
    "43": {10, 11},
    "44": {9, 10},
    "45": {8},
    "46": {7, 8, 9},
    "47": {8},
    "48": {9},
    "49": {10, 11},
    "51": {9},
    "52": {10},
    "53": {8},
    "54": {10},
    "55": {10, 11},
    "56": {9},
    "57": {10},
    "58": {10},
    "60": {9, 10},
    "61": {9},
    "62": {9, 10, 11},
    "63": {10},
    "64": {8, 9, 10},
    "65": {8},
    "66": {9},
    "81": {10},
    "82": {9, 10},
    "84": {9, 10},
    "86": {11},
    "90": {10},
    "91": {10},
    "92": {10},
    "93": {9},
    "94": {9},
    "95": {8, 9, 10},
    "98": {10},
    # 3 digits
    "212": {9},
    "213": {9},
    "216": {8},
    "218": {9},
    "221": {9},
    "225": {10},
    "233": {9},
    "234": {10},
    "237": {9},
    "249": {9},
    "250": {9},
    "251": {9},
    "254": {9},
    "255": {9},
    "256": {9},
    "260": {9},
    "263": {9},
    "351": {9},
    "352": {9},
    "353": {9},
    "354": {7},
    "355": {9},
    "356": {8},
    "357": {8},
    "358": {9, 10},
    "359": {8, 9},
    "370": {8},
    "371": {8},
    "372": {7, 8},
    "373": {8},
    "374": {8},
    "375": {9},
    "380": {9},
    "381": {8, 9},
    "385": {8, 9},
    "386": {8},
    "387": {8},
    "389": {8},
    "420": {9},
    "421": {9},
    "502": {8},
    "503": {8},
    "504": {8},
    "505": {8},
    "506": {8},
    "507": {8},
    "591": {8},
    "593": {9},
    "595": {9},
    "598": {8},
    "852": {8},
    "853": {8},
    "855": {8, 9},
    "856": {9, 10},
    "880": {10},
    "886": {9},
    "960": {7},
    "961": {7, 8},
    "962": {9},
    "963": {9},
    "964": {10},
    "965": {8},
    "966": {9},
    "967": {9},
    "968": {8},
    "970": {9},
    "971": {9},
    "972": {9},
    "973": {8},
    "974": {8},
    "975": {8},
    "976": {8},
    "977": {10},
    "992": {9},
    "993": {8},
    "994": {9},
    "995": {9},
    "996": {9},
    "998": {9},
}

# Minimum national-number length to accept an unknown code of this many digits.
FALLBACK_MIN_LENGTH = {3: 7, 2: 8, 1: 10}
