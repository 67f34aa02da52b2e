"""Bilingual (English / Hindi) string banks used by the assistant."""

import re

LANGUAGES = ("en", "hi")

_DEVANAGARI_RE = re.compile(r"[ऀ-ॿ]")


def normalize_language(language):
    if language in LANGUAGES:
        return language
    return "en"


def pick(bank, language):
    """Return the entry of a {"en": ..., "hi": ...} bank for `language`."""
    return bank[normalize_language(language)]


def has_devanagari(text):
    return bool(_DEVANAGARI_RE.search(text or ""))


def detect_language(text):
    return "hi" if has_devanagari(text) else "en"


# ----------------------------
# Chat surface
# ----------------------------

WELCOME = {
    "en": (
        "Hello! I am AgroBot, your agricultural assistant. I can provide information about sugarcane "
        "farming, crop recommendations, disease identification, and best practices for Uttar Pradesh "
        "farmers. How can I help you today?"
    ),
    "hi": (
        "नमस्ते! मैं कृषिबॉट हूँ, आपका कृषि सहायक। मैं गन्ना की खेती, फसल अनुशंसाओं, रोग पहचान और उत्तर प्रदेश "
        "के किसानों के लिए सर्वोत्तम प्रथाओं के बारे में जानकारी प्रदान कर सकता हूं। आज मैं आपकी कैसे मदद कर सकता हूं?"
    ),
}

APOLOGY = {
    "en": "I'm sorry, I encountered an error. Please try again later.",
    "hi": "मुझे खेद है, मुझे एक त्रुटि मिली। कृपया बाद में पुनः प्रयास करें।",
}

IMAGE_APOLOGY = {
    "en": "I'm sorry, I encountered an error processing your image. Please try again later.",
    "hi": "मुझे खेद है, आपकी छवि को संसाधित करने में मुझे एक त्रुटि मिली। कृपया बाद में पुनः प्रयास करें।",
}

REMOTE_UNPROCESSED = {
    "en": "I'm sorry, I couldn't process that request.",
    "hi": "मुझे खेद है, मैं उस अनुरोध को संसाधित नहीं कर सका।",
}

IMAGE_UPLOADED = {
    "en": "I've uploaded a plant image for identification.",
    "hi": "मैंने पहचान के लिए एक पौधे की छवि अपलोड की है।",
}

IMAGE_RECEIVED = {
    "en": (
        "I've received your plant image. Let me analyze it to identify the plant and any potential issues."
    ),
    "hi": (
        "मुझे आपकी पौधे की छवि मिल गई है। पौधे की पहचान करने और किसी भी संभावित समस्या का पता लगाने के लिए "
        "मुझे इसका विश्लेषण करने दें।"
    ),
}

TRAINING_NUDGE = {
    "en": (
        "For more accurate plant identification, consider training the model with your own plant images. "
        "Click the settings icon to start training."
    ),
    "hi": (
        "अधिक सटीक पौधों की पहचान के लिए, अपनी खुद की पौधों की छवियों के साथ मॉडल को प्रशिक्षित करने पर विचार करें। "
        "प्रशिक्षण शुरू करने के लिए सेटिंग्स आइकन पर क्लिक करें।"
    ),
}

IMAGE_TOO_LARGE = {
    "en": "Image size should be less than 5MB",
    "hi": "छवि का आकार 5MB से कम होना चाहिए",
}

IMAGE_WRONG_TYPE = {
    "en": "Please select an image file",
    "hi": "कृपया एक छवि फ़ाइल चुनें",
}

TRAINING_TOO_FEW_IMAGES = {
    "en": "Not enough training images (minimum {minimum} required)",
    "hi": "पर्याप्त प्रशिक्षण छवियां नहीं हैं (कम से कम {minimum} आवश्यक)",
}

TRAINING_IN_PROGRESS = {
    "en": "Training is already in progress.",
    "hi": "प्रशिक्षण पहले से चल रहा है।",
}

UNSUPPORTED_PLANT = {
    "en": "Plant type {plant} not supported",
    "hi": "पौधे का प्रकार {plant} समर्थित नहीं है",
}

ANALYSIS_REPORT = {
    "en": {
        "intro": "Based on the image, this appears to be a {plant} plant with {confidence}% confidence.\n\n",
        "health": "Plant health: {health}.\n",
        "diseases": "Possible issues detected: {diseases}.\n\n",
        "recommendations": "Recommendations:\n",
    },
    "hi": {
        "intro": "छवि के आधार पर, यह {plant} का पौधा प्रतीत होता है, {confidence}% विश्वास के साथ।\n\n",
        "health": "पौधे का स्वास्थ्य: {health}।\n",
        "diseases": "संभावित समस्याएं: {diseases}।\n\n",
        "recommendations": "अनुशंसाएँ:\n",
    },
}

# ----------------------------
# Local intent resolution
# ----------------------------

GREETING_PATTERNS = {
    "en": re.compile(r"^(hi|hello|hey|namaste|नमस्ते|हेलो|हाय)$", re.IGNORECASE),
    "hi": re.compile(r"^(नमस्ते|नमस्कार|हेलो|हाय|namaste|hello|hi)$", re.IGNORECASE),
}

TOPIC_KEYWORDS = {
    "recommendation": ("recommend", "which crop", "suggest crop", "फसल सुझाव", "कौन सी फसल"),
    "recommendation_clay": ("clay", "मिट्टी"),
    "recommendation_sandy": ("sandy", "बलुई"),
    "disease": ("disease", "pest", "रोग", "कीट"),
    "disease_red_rot": ("red rot", "लाल सड़न"),
    "disease_smut": ("smut", "कंडुआ"),
    "irrigation": ("water", "irrigation", "पानी", "सिंचाई"),
    "fertilizer": ("fertilizer", "उर्वरक", "nutrients", "पोषक तत्व"),
    "yield": ("yield", "production", "उपज", "उत्पादन"),
    "help": ("help", "मदद", "how to", "कैसे"),
    "crop_name": ("sugarcane", "गन्ना"),
}

REPLIES = {
    "greeting": {
        "en": "Hello! I'm AgroBot, your agriculture assistant. How can I help you today with farming information?",
        "hi": "नमस्ते! मैं कृषिबॉट हूँ, आपका कृषि सहायक। आज मैं आपकी कृषि जानकारी के साथ कैसे मदद कर सकता हूं?",
    },
    "crop_name": {
        "en": (
            "Sugarcane is a major crop in Uttar Pradesh. It grows best in well-drained, fertile soils with pH "
            "6.5-7.5. For optimal growth, maintain soil moisture, apply balanced fertilization (NPK 150:60:60 "
            "kg/ha), and follow integrated pest management."
        ),
        "hi": (
            "उत्तर प्रदेश में गन्ना एक प्रमुख फसल है। यह अच्छी जल निकासी वाली, उपजाऊ मिट्टी में pH 6.5-7.5 के साथ "
            "सबसे अच्छा बढ़ता है। इष्टतम विकास के लिए, मिट्टी की नमी बनाए रखें, संतुलित उर्वरीकरण (NPK 150:60:60 "
            "किग्रा/हेक्टेयर) लागू करें, और एकीकृत कीट प्रबंधन का पालन करें।"
        ),
    },
    "recommendation_clay": {
        "en": (
            "For clay soils in UP, I recommend growing sugarcane, rice, or wheat. Sugarcane grows well in heavy "
            "clay soils with good water retention."
        ),
        "hi": (
            "यूपी में मिट्टी वाली मिट्टी के लिए, मैं गन्ना, चावल या गेहूं उगाने की सलाह देता हूं। गन्ना अच्छे जल धारण "
            "वाली भारी मिट्टी वाली मिट्टी में अच्छी तरह से बढ़ता है।"
        ),
    },
    "recommendation_sandy": {
        "en": (
            "For sandy soils in UP, consider growing pulses, groundnuts, or certain vegetable crops. For "
            "sugarcane in sandy soils, you'll need more frequent irrigation and organic matter amendments."
        ),
        "hi": (
            "यूपी में बलुई मिट्टी के लिए, दलहन, मूंगफली या कुछ सब्जी फसलों को उगाने पर विचार करें। बलुई मिट्टी में "
            "गन्ने के लिए, आपको अधिक बार सिंचाई और जैविक पदार्थ संशोधनों की आवश्यकता होगी।"
        ),
    },
    "recommendation": {
        "en": (
            "For crop recommendations, I need more information about your soil type (sandy, clay, loam), "
            "rainfall in your area, and irrigation facilities."
        ),
        "hi": (
            "फसल की सिफारिशों के लिए, मुझे आपकी मिट्टी के प्रकार (बलुई, मिट्टी, दोमट), आपके क्षेत्र में वर्षा और "
            "सिंचाई सुविधाओं के बारे में अधिक जानकारी की आवश्यकता है।"
        ),
    },
    "disease_red_rot": {
        "en": (
            "Red Rot disease in sugarcane is caused by fungus Colletotrichum falcatum. Look for reddish "
            "discoloration inside the stem, leaf yellowing, and wilting. Control by using disease-free seed "
            "material, treating setts with fungicides, and removing infected plants."
        ),
        "hi": (
            "गन्ने में लाल सड़न रोग कवक कोलेटोट्रिकम फालकेटम के कारण होता है। स्टेम के अंदर लालिमा, पत्तियों का "
            "पीलापन और मुरझाने के लिए देखें। रोग मुक्त बीज सामग्री का उपयोग करके, कवकनाशी के साथ सेट्स का इलाज और "
            "संक्रमित पौधों को हटाकर नियंत्रण करें।"
        ),
    },
    "disease_smut": {
        "en": (
            "Smut disease is caused by fungus Ustilago scitaminea. It forms black whip-like structures at "
            "growing points. Control by using disease-free material, hot water treatment of setts, and "
            "removing infected plants."
        ),
        "hi": (
            "कंडुआ रोग कवक अस्टिलागो सिटामिनिया के कारण होता है। यह बढ़ने वाले बिंदुओं पर काले चाबुक जैसी संरचनाएँ "
            "बनाता है। रोग मुक्त सामग्री का उपयोग करके, सेट्स के गर्म पानी के उपचार और संक्रमित पौधों को हटाकर "
            "नियंत्रण करें।"
        ),
    },
    "disease": {
        "en": (
            "To help identify the disease or pest problem, can you describe the symptoms? Look for "
            "discoloration, unusual growth, wilting, or insect presence. You can also use our Disease "
            "Detection tool to upload a photo."
        ),
        "hi": (
            "रोग या कीट समस्या की पहचान करने में मदद करने के लिए, क्या आप लक्षणों का वर्णन कर सकते हैं? रंग परिवर्तन, "
            "असामान्य विकास, मुरझाने या कीटों की उपस्थिति देखें। आप फोटो अपलोड करने के लिए हमारे रोग पहचान उपकरण "
            "का भी उपयोग कर सकते हैं।"
        ),
    },
    "irrigation": {
        "en": (
            "For sugarcane irrigation in UP: Irrigate every 8-10 days during summer months, 15-20 days during "
            "winter, and adjust based on rainfall during monsoon. Critical stages for irrigation are "
            "germination, tillering, grand growth, and maturity."
        ),
        "hi": (
            "यूपी में गन्ने की सिंचाई के लिए: गर्मी के महीनों में हर 8-10 दिनों में, सर्दियों के दौरान 15-20 दिनों में "
            "सिंचाई करें, और मानसून के दौरान वर्षा के आधार पर समायोजित करें। सिंचाई के महत्वपूर्ण चरण अंकुरण, "
            "टिलरिंग, बड़ा विकास और परिपक्वता हैं।"
        ),
    },
    "fertilizer": {
        "en": (
            "For sugarcane in UP, apply NPK at 150:60:60 kg/ha in three splits - at planting (30% N, 100% P, "
            "50% K), at 60-70 days (40% N), and at 90-120 days (30% N, 50% K). Also add 10-15 tons/ha of "
            "organic manure before planting."
        ),
        "hi": (
            "यूपी में गन्ने के लिए, तीन बार में NPK को 150:60:60 किग्रा/हेक्टेयर पर लागू करें - रोपण पर (30% N, "
            "100% P, 50% K), 60-70 दिनों पर (40% N), और 90-120 दिनों पर (30% N, 50% K)। रोपण से पहले 10-15 "
            "टन/हेक्टेयर जैविक खाद भी जोड़ें।"
        ),
    },
    "yield": {
        "en": (
            "To predict your sugarcane yield, use our Yield Prediction tool. You'll need to provide your "
            "district in UP, planted area, soil type, and irrigation details. The average yield in UP ranges "
            "from 60-80 tonnes per hectare depending on these factors."
        ),
        "hi": (
            "अपने गन्ने की उपज की भविष्यवाणी करने के लिए, हमारे उपज भविष्यवाणी उपकरण का उपयोग करें। आपको यूपी में "
            "अपना जिला, लगाए गए क्षेत्र, मिट्टी के प्रकार और सिंचाई विवरण प्रदान करने की आवश्यकता होगी। यूपी में "
            "औसत उपज इन कारकों के आधार पर 60-80 टन प्रति हेक्टेयर की रेंज में होती है।"
        ),
    },
    "help": {
        "en": (
            "Our website has several tools to help farmers: 1) Yield Prediction - estimate your crop "
            "production, 2) Disease Detection - identify diseases from leaf images, 3) Weather Display - check "
            "local conditions, and 4) This chatbot for agricultural queries. What would you like help with?"
        ),
        "hi": (
            "हमारी वेबसाइट में किसानों की मदद के लिए कई उपकरण हैं: 1) उपज भविष्यवाणी - अपनी फसल उत्पादन का अनुमान "
            "लगाएं, 2) रोग पहचान - पत्ते की छवियों से रोगों की पहचान करें, 3) मौसम प्रदर्शन - स्थानीय परिस्थितियां "
            "जांचें, और 4) कृषि प्रश्नों के लिए यह चैटबोट। आप किस प्रकार की सहायता चाहते हैं?"
        ),
    },
    "default": {
        "en": (
            "I can help with information about crop recommendations, disease identification, irrigation "
            "advice, fertilizer recommendations, and agricultural best practices. What specifically would "
            "you like to know about?"
        ),
        "hi": (
            "मैं फसल सिफारिशों, रोग पहचान, सिंचाई सलाह, उर्वरक सिफारिशों और कृषि सर्वोत्तम अभ्यास के बारे में "
            "जानकारी के साथ मदद कर सकता हूं। विशेष रूप से आप किस बारे में जानना चाहेंगे?"
        ),
    },
}

# Broader agronomic terms, matched against the reply language's bank only.
GENERIC_TERMS = [
    {
        "en": ("plant", "sow", "seed", "germination", "grow"),
        "hi": ("पौधा", "बीज", "अंकुरण", "बढ़ना"),
        "response": {
            "en": (
                "For planting sugarcane, use disease-free setts with 2-3 buds. Plant in furrows 10-15cm deep, "
                "with row spacing of 90-120cm. Ensure proper soil preparation with adequate organic matter."
            ),
            "hi": (
                "गन्ना लगाने के लिए, 2-3 आंखों वाले रोग मुक्त सेट्स का उपयोग करें। 10-15 सेमी गहरी नालियों में, "
                "90-120 सेमी पंक्ति दूरी के साथ लगाएं। पर्याप्त जैविक पदार्थ के साथ उचित मिट्टी की तैयारी सुनिश्चित करें।"
            ),
        },
    },
    {
        "en": ("harvest", "cut", "yield", "mature"),
        "hi": ("कटाई", "उपज", "परिपक्व"),
        "response": {
            "en": (
                "Harvest sugarcane when it reaches full maturity, typically 12-18 months after planting. Look "
                "for signs like yellow leaves, reduced growth, and optimal Brix level (sugar content). Cut "
                "stalks at the base, close to the ground."
            ),
            "hi": (
                "गन्ने की कटाई तब करें जब वह पूरी तरह से परिपक्व हो जाए, आमतौर पर लगाने के 12-18 महीने बाद। पीले "
                "पत्ते, कम विकास और इष्टतम ब्रिक्स स्तर (चीनी सामग्री) जैसे संकेतों को देखें। तनों को आधार पर, जमीन "
                "के पास से काटें।"
            ),
        },
    },
]

# ----------------------------
# Plant classification
# ----------------------------

SUPPORTED_PLANTS = (
    "sugarcane", "wheat", "rice", "maize", "potato",
    "tomato", "cotton", "pulses", "mustard", "soybean",
)

PLANT_TRANSLATIONS = {
    "sugarcane": "गन्ना",
    "wheat": "गेहूं",
    "rice": "चावल",
    "maize": "मक्का",
    "potato": "आलू",
    "tomato": "टमाटर",
    "cotton": "कपास",
    "pulses": "दलहन",
    "mustard": "सरसों",
    "soybean": "सोयाबीन",
}

HEALTH_STATES = ("healthy", "minor issues", "possible disease", "needs attention")

# The two most severe health states; only these carry diseases.
SEVERE_HEALTH_STATES = HEALTH_STATES[2:]

HEALTH_TRANSLATIONS = {
    "healthy": "स्वस्थ",
    "minor issues": "मामूली समस्याएं",
    "possible disease": "संभावित रोग",
    "needs attention": "ध्यान देने की आवश्यकता है",
}

PLANT_DISEASES = {
    "sugarcane": ("red rot", "smut", "rust", "leaf scald"),
    "wheat": ("rust", "powdery mildew", "loose smut", "leaf blight"),
    "rice": ("blast", "blight", "sheath blight", "bacterial leaf streak"),
    "maize": ("leaf blight", "rust", "smut", "stalk rot"),
    "potato": ("late blight", "early blight", "black scurf", "viral infection"),
}

DISEASE_TRANSLATIONS = {
    "red rot": "लाल सड़न",
    "smut": "कंडुआ",
    "rust": "रतुआ",
    "leaf scald": "पत्ती झुलसा",
    "powdery mildew": "चूर्णिल आसिता",
    "loose smut": "ढीला कंडुआ",
    "leaf blight": "पत्ती झुलसा",
    "blast": "झोंका",
    "blight": "झुलसा",
    "sheath blight": "आवरण झुलसा",
    "bacterial leaf streak": "बैक्टीरियल पत्ती धारी",
    "stalk rot": "तना सड़न",
    "late blight": "लेट झुलसा",
    "early blight": "अर्ली झुलसा",
    "black scurf": "काला पपड़ी",
    "viral infection": "वायरल संक्रमण",
}

RECOMMENDATIONS_BY_HEALTH = {
    "healthy": ("Continue regular care and monitoring",),
    "minor issues": ("Check irrigation levels", "Monitor for pest activity"),
    "possible disease": (
        "Consider applying appropriate fungicide/pesticide",
        "Consult with local agricultural extension office",
        "Isolate affected plants if possible",
    ),
}
RECOMMENDATIONS_BY_HEALTH["needs attention"] = RECOMMENDATIONS_BY_HEALTH["possible disease"]

RECOMMENDATION_TRANSLATIONS = {
    "Continue regular care and monitoring": "नियमित देखभाल और निगरानी जारी रखें",
    "Check irrigation levels": "सिंचाई के स्तर की जांच करें",
    "Monitor for pest activity": "कीट गतिविधि के लिए निगरानी करें",
    "Consider applying appropriate fungicide/pesticide": "उपयुक्त फफूंदीनाशक/कीटनाशक लगाने पर विचार करें",
    "Consult with local agricultural extension office": "स्थानीय कृषि विस्तार कार्यालय से परामर्श करें",
    "Isolate affected plants if possible": "यदि संभव हो तो प्रभावित पौधों को अलग करें",
}


def translate(table, text, language):
    """Translate `text` to Hindi via `table`; anything unknown passes through."""
    if normalize_language(language) != "hi":
        return text
    return table.get(text, text)


# ----------------------------
# WhatsApp
# ----------------------------

WHATSAPP_WELCOME = (
    "Welcome to AgriConnect! You are now connected to our WhatsApp service. "
    "You can ask questions about sugarcane farming anytime."
)
YIELD_REPLY = "Predicted yield: {quintals} quintals"
YIELD_USAGE_INVALID = "Invalid input. Use: yield <district> <area> <soil> (e.g., yield Lucknow 5 alluvial)"
YIELD_USAGE_MISSING = "Please provide district, area, and soil type. Example: yield Lucknow 5 alluvial"
WHATSAPP_HELP = 'Send "yield <district> <area> <soil>" to predict yield. Example: yield Lucknow 5 alluvial'
WHATSAPP_APOLOGY = "माफ करें, कुछ समस्या हुई है। कृपया दोबारा कोशिश करें। | Sorry, there was an issue. Please try again."
