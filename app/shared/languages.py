# Languages a guide can list on their profile
SUPPORTED_LANGUAGES = sorted(
    {
        "Angika",
        "Arunachali",
        "Assamese",
        "Awadhi",
        "Bagheli",
        "Balti",
        "Bengali",
        "Bhili",
        "Bhojpuri",
        "Bodo",
        "Bundeli",
        "Chakma",
        "Chhattisgarhi",
        "Dogri",
        "English",
        "Garo",
        "Gondi",
        "Gujarati",
        "Gurung",
        "Haryanvi",
        "Hindi",
        "Kannada",
        "Kashmiri",
        "Kharia",
        "Khasi",
        "Konda-Dora",
        "Konkani",
        "Kui",
        "Ladakhi",
        "Lepcha",
        "Limbu",
        "Magahi",
        "Maithili",
        "Malayalam",
        "Malvi",
        "Manipuri",
        "Marathi",
        "Mizo",
        "Monpa",
        "Mundari",
        "Muria",
        "Nagamese",
        "Nepali",
        "Newari",
        "Nimadi",
        "Odia",
        "Pahari",
        "Punjabi",
        "Rai",
        "Rajasthani",
        "Santali",
        "Sherpa",
        "Sindhi",
        "Tamil",
        "Telugu",
        "Tripuri",
        "Tulu",
        "Urdu",
    }
)
