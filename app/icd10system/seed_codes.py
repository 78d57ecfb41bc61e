# app/icd10system/seed_codes.py
"""Common ICD-10 codes for a primary-care setting in Kenya."""

CHAPTERS = {
    "I": "Certain infectious and parasitic diseases",
    "IV": "Endocrine, nutritional and metabolic diseases",
    "V": "Mental and behavioural disorders",
    "IX": "Diseases of the circulatory system",
    "X": "Diseases of the respiratory system",
    "XI": "Diseases of the digestive system",
    "XIII": "Diseases of the musculoskeletal system and connective tissue",
    "XV": "Pregnancy, childbirth and the puerperium",
    "XVIII": "Symptoms, signs and abnormal clinical and laboratory findings",
    "XIX": "Injury, poisoning and certain other consequences of external causes",
    "XXI": "Factors influencing health status and contact with health services",
    "XXII": "Codes for special purposes",
}

COMMON_ICD10_CODES = [
    # Malaria
    {"code": "B50", "short_description": "Plasmodium falciparum malaria", "chapter_code": "I", "search_terms": ["malaria", "falciparum", "cerebral malaria"]},
    {"code": "B50.0", "short_description": "Plasmodium falciparum malaria with cerebral complications", "chapter_code": "I", "search_terms": ["cerebral malaria", "falciparum", "brain"]},
    {"code": "B50.8", "short_description": "Other severe and complicated Plasmodium falciparum malaria", "chapter_code": "I", "search_terms": ["severe malaria", "complicated malaria", "falciparum"]},
    {"code": "B50.9", "short_description": "Plasmodium falciparum malaria, unspecified", "chapter_code": "I", "search_terms": ["malaria", "falciparum"]},
    {"code": "B51", "short_description": "Plasmodium vivax malaria", "chapter_code": "I", "search_terms": ["malaria", "vivax"]},
    {"code": "B51.9", "short_description": "Plasmodium vivax malaria without complication", "chapter_code": "I", "search_terms": ["malaria", "vivax"]},
    {"code": "B52", "short_description": "Plasmodium malariae malaria", "chapter_code": "I", "search_terms": ["malaria", "malariae"]},
    {"code": "B53.0", "short_description": "Plasmodium ovale malaria", "chapter_code": "I", "search_terms": ["malaria", "ovale"]},
    {"code": "B54", "short_description": "Unspecified malaria", "chapter_code": "I", "search_terms": ["malaria", "unspecified"]},

    # Other infectious
    {"code": "A09", "short_description": "Infectious gastroenteritis and colitis", "chapter_code": "I", "search_terms": ["diarrhea", "gastro", "stomach flu"]},
    {"code": "A15", "short_description": "Respiratory tuberculosis", "chapter_code": "I", "search_terms": ["tb", "tuberculosis", "lung tb"]},
    {"code": "A15.0", "short_description": "Tuberculosis of lung", "chapter_code": "I", "search_terms": ["tb", "tuberculosis", "pulmonary"]},
    {"code": "B20", "short_description": "Human immunodeficiency virus [HIV] disease", "chapter_code": "I", "search_terms": ["hiv", "aids", "immunodeficiency"]},
    {"code": "B24", "short_description": "Unspecified human immunodeficiency virus [HIV] disease", "chapter_code": "I", "search_terms": ["hiv", "aids"]},
    {"code": "B34.9", "short_description": "Viral infection, unspecified", "chapter_code": "I", "search_terms": ["virus", "viral"]},

    # Diabetes
    {"code": "E10", "short_description": "Type 1 diabetes mellitus", "chapter_code": "IV", "search_terms": ["diabetes", "type 1", "t1dm", "insulin dependent"]},
    {"code": "E10.9", "short_description": "Type 1 diabetes mellitus without complications", "chapter_code": "IV", "search_terms": ["diabetes", "type 1", "t1dm", "juvenile diabetes"]},
    {"code": "E11", "short_description": "Type 2 diabetes mellitus", "chapter_code": "IV", "search_terms": ["diabetes", "type 2", "t2dm", "sugar"]},
    {"code": "E11.9", "short_description": "Type 2 diabetes mellitus without complications", "chapter_code": "IV", "search_terms": ["diabetes", "type 2", "t2dm"]},
    {"code": "E11.65", "short_description": "Type 2 diabetes mellitus with hyperglycemia", "chapter_code": "IV", "search_terms": ["high sugar", "hyperglycemia"]},

    # Mental health
    {"code": "F32.9", "short_description": "Depressive episode, unspecified", "chapter_code": "V", "search_terms": ["depression", "depressed"]},
    {"code": "F41.9", "short_description": "Anxiety disorder, unspecified", "chapter_code": "V", "search_terms": ["anxiety", "anxious"]},
    {"code": "F51.9", "short_description": "Nonorganic sleep disorder, unspecified", "chapter_code": "V", "search_terms": ["insomnia", "sleep problem"]},

    # Hypertension
    {"code": "I10", "short_description": "Essential (primary) hypertension", "chapter_code": "IX", "search_terms": ["hypertension", "high blood pressure", "htn", "hbp", "bp"]},
    {"code": "I11", "short_description": "Hypertensive heart disease", "chapter_code": "IX", "search_terms": ["hypertension", "heart disease", "hbp"]},
    {"code": "I11.0", "short_description": "Hypertensive heart disease with heart failure", "chapter_code": "IX", "search_terms": ["hypertensive heart", "heart failure"]},
    {"code": "I15", "short_description": "Secondary hypertension", "chapter_code": "IX", "search_terms": ["hypertension", "secondary", "high blood pressure"]},

    # Respiratory
    {"code": "J00", "short_description": "Acute nasopharyngitis (common cold)", "chapter_code": "X", "search_terms": ["cold", "common cold", "runny nose"]},
    {"code": "J06.9", "short_description": "Acute upper respiratory infection, unspecified", "chapter_code": "X", "search_terms": ["uri", "cold", "flu", "cough", "throat infection"]},
    {"code": "J18", "short_description": "Pneumonia, organism unspecified", "chapter_code": "X", "search_terms": ["pneumonia", "lung infection"]},
    {"code": "J18.9", "short_description": "Pneumonia, unspecified", "chapter_code": "X", "search_terms": ["pneumonia", "chest infection"]},
    {"code": "J20.9", "short_description": "Acute bronchitis, unspecified", "chapter_code": "X", "search_terms": ["bronchitis", "chest infection"]},
    {"code": "J45", "short_description": "Asthma", "chapter_code": "X", "search_terms": ["asthma", "wheezing", "bronchial"]},
    {"code": "J45.9", "short_description": "Asthma, unspecified", "chapter_code": "X", "search_terms": ["asthma", "unspecified"]},

    # Digestive
    {"code": "K21.9", "short_description": "Gastro-oesophageal reflux disease without oesophagitis", "chapter_code": "XI", "search_terms": ["gerd", "reflux", "heartburn"]},
    {"code": "K29.7", "short_description": "Gastritis, unspecified", "chapter_code": "XI", "search_terms": ["gastritis", "stomach pain"]},
    {"code": "K59.0", "short_description": "Constipation", "chapter_code": "XI", "search_terms": ["constipation"]},

    # Musculoskeletal
    {"code": "M25.5", "short_description": "Pain in joint", "chapter_code": "XIII", "search_terms": ["joint pain", "arthralgia"]},
    {"code": "M54.5", "short_description": "Low back pain", "chapter_code": "XIII", "search_terms": ["back pain", "lumbago"]},
    {"code": "M79.1", "short_description": "Myalgia", "chapter_code": "XIII", "search_terms": ["muscle pain", "body aches"]},

    # Pregnancy
    {"code": "O80", "short_description": "Single spontaneous delivery", "chapter_code": "XV", "search_terms": ["delivery", "birth"]},

    # Symptoms
    {"code": "R50.9", "short_description": "Fever, unspecified", "chapter_code": "XVIII", "search_terms": ["fever", "pyrexia", "high temperature"]},
    {"code": "R51", "short_description": "Headache", "chapter_code": "XVIII", "search_terms": ["headache", "head pain"]},

    # Injuries
    {"code": "S09.9", "short_description": "Unspecified injury of head", "chapter_code": "XIX", "search_terms": ["head injury"]},
    {"code": "S61.9", "short_description": "Open wound of wrist and hand part, part unspecified", "chapter_code": "XIX", "search_terms": ["hand cut", "finger cut"]},
    {"code": "T14.9", "short_description": "Injury, unspecified", "chapter_code": "XIX", "search_terms": ["injury"]},

    # Health status
    {"code": "Z21", "short_description": "Asymptomatic human immunodeficiency virus [HIV] infection status", "chapter_code": "XXI", "search_terms": ["hiv positive"]},
    {"code": "Z34.9", "short_description": "Supervision of normal pregnancy, unspecified", "chapter_code": "XXI", "search_terms": ["antenatal", "pregnancy"]},

    # Special purposes
    {"code": "U07.1", "short_description": "COVID-19, virus identified", "chapter_code": "XXII", "search_terms": ["covid", "coronavirus", "covid-19", "sars-cov-2"]},
]
