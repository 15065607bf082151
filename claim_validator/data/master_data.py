# claim_validator/data/master_data.py
# Static reference data for the claim validation engine: the medical
# terminology taxonomy, coverage and exclusion rules, procedure price bands,
# the known network hospitals and the demo policy book.
# Everything here is read-only at runtime.

from types import MappingProxyType

from ..pydantic_schemas import (
    CoverageRule,
    ExclusionCategory,
    ExclusionRule,
    MedicalCategory,
    ProcedurePriceRange,
    TaxonomyEntry,
)

# =================================================================================
# == Medical terminology taxonomy
# =================================================================================
# Iteration order matters: categories with equal relevance keep this order.
MEDICAL_TAXONOMY = MappingProxyType(
    {
        MedicalCategory.NEUROLOGICAL: TaxonomyEntry(
            keywords=("brain", "head", "neuro", "cranial", "cerebral", "neural", "cognitive", "neurological"),
            conditions=(
                "traumatic brain injury", "stroke", "aneurysm", "hemorrhage",
                "concussion", "brain tumor", "epilepsy", "meningitis",
            ),
            procedures=("craniotomy", "craniectomy", "neurosurgery", "brain surgery", "burr hole", "ventriculostomy"),
        ),
        MedicalCategory.CARDIAC: TaxonomyEntry(
            keywords=("heart", "cardiac", "cardio", "coronary", "myocardial", "cardiovascular"),
            conditions=("heart attack", "coronary artery disease", "heart failure", "arrhythmia", "angina"),
            procedures=("bypass", "angioplasty", "stent", "catheterization", "pacemaker"),
        ),
        MedicalCategory.ORTHOPEDIC: TaxonomyEntry(
            keywords=("bone", "joint", "fracture", "orthopedic", "musculoskeletal", "spine", "spinal"),
            conditions=("fracture", "dislocation", "arthritis", "osteoporosis", "spinal injury"),
            procedures=("surgery", "fixation", "replacement", "fusion", "arthroscopy"),
        ),
        MedicalCategory.GENERAL: TaxonomyEntry(
            keywords=(
                "surgery", "trauma", "injury", "disease", "disorder", "syndrome", "infection",
                "emergency", "intensive", "icu", "operation", "transplant", "biopsy", "scan",
                "mri", "ct", "x-ray", "ultrasound", "therapy", "rehabilitation", "physiotherapy",
                "anesthesia", "ventilator", "blood", "pathology", "diagnostic", "treatment",
            ),
            conditions=("acute", "chronic", "severe", "moderate", "mild", "critical", "stable"),
            procedures=("consultation", "examination", "monitoring", "care", "management"),
        ),
    }
)

# =================================================================================
# == Coverage rules
# =================================================================================
COVERAGE_RULES = MappingProxyType(
    {
        MedicalCategory.NEUROLOGICAL: CoverageRule(
            base_score=0.9,
            rationale="Neurological conditions are covered under medical emergencies and specialized care",
        ),
        MedicalCategory.CARDIAC: CoverageRule(
            base_score=0.9,
            rationale="Cardiac conditions are covered under critical illness and emergency care",
        ),
        MedicalCategory.ORTHOPEDIC: CoverageRule(
            base_score=0.85,
            rationale="Orthopedic conditions are covered under accident and injury benefits",
        ),
        MedicalCategory.GENERAL: CoverageRule(
            base_score=0.7,
            rationale="General medical conditions are covered under basic health insurance",
        ),
    }
)

HIGH_VALUE_PROCEDURES = (
    "surgery", "operation", "transplant", "emergency", "icu", "intensive care",
    "craniotomy", "bypass", "angioplasty", "catheterization",
)

# =================================================================================
# == Exclusion rules
# =================================================================================
EXCLUSION_RULES = MappingProxyType(
    {
        ExclusionCategory.COSMETIC: ExclusionRule(
            keywords=("cosmetic", "plastic surgery", "aesthetic", "beauty", "liposuction", "botox"),
            weight=0.9,
            reason="Cosmetic procedures are typically excluded from health insurance",
        ),
        ExclusionCategory.DENTAL: ExclusionRule(
            keywords=("dental", "tooth", "teeth", "orthodontic", "braces", "oral surgery"),
            weight=0.8,
            reason="Dental treatments usually require separate dental insurance",
        ),
        ExclusionCategory.VISION: ExclusionRule(
            keywords=("vision", "eye", "optical", "glasses", "contact lens", "lasik"),
            weight=0.8,
            reason="Vision care often requires separate vision insurance",
        ),
        ExclusionCategory.EXPERIMENTAL: ExclusionRule(
            keywords=("experimental", "investigational", "clinical trial", "unapproved"),
            weight=0.9,
            reason="Experimental treatments are excluded from standard coverage",
        ),
        ExclusionCategory.PREEXISTING: ExclusionRule(
            keywords=("pre-existing", "chronic", "congenital", "hereditary", "genetic"),
            weight=0.7,
            reason="Pre-existing conditions may have waiting periods or exclusions",
        ),
        ExclusionCategory.ELECTIVE: ExclusionRule(
            keywords=("elective", "non-emergency", "planned", "routine"),
            weight=0.6,
            reason="Elective procedures may have different coverage rules",
        ),
    }
)

# Matched as whole words; "life threatening" is accepted with a space or hyphen.
EMERGENCY_TERMS = ("emergency", "trauma", "accident", "acute", "critical", "life-threatening")

# =================================================================================
# == Procedure price bands (INR)
# =================================================================================
# Keyed by taxonomy category; "general" is the fallback table.
GENERAL_PRICING_TABLE = "general"

PROCEDURE_PRICING = MappingProxyType(
    {
        MedicalCategory.NEUROLOGICAL.value: MappingProxyType(
            {
                "craniotomy": ProcedurePriceRange(min=200000, max=800000, avg=400000),
                "craniectomy": ProcedurePriceRange(min=200000, max=800000, avg=400000),
                "brain surgery": ProcedurePriceRange(min=300000, max=1000000, avg=500000),
                "neurosurgery": ProcedurePriceRange(min=250000, max=900000, avg=450000),
                "burr hole": ProcedurePriceRange(min=80000, max=300000, avg=150000),
                "ventriculostomy": ProcedurePriceRange(min=100000, max=350000, avg=180000),
                "mri brain": ProcedurePriceRange(min=8000, max=25000, avg=15000),
                "ct scan head": ProcedurePriceRange(min=3000, max=15000, avg=8000),
            }
        ),
        MedicalCategory.CARDIAC.value: MappingProxyType(
            {
                "angioplasty": ProcedurePriceRange(min=150000, max=500000, avg=250000),
                "bypass": ProcedurePriceRange(min=250000, max=700000, avg=400000),
                "stent": ProcedurePriceRange(min=30000, max=200000, avg=90000),
                "catheterization": ProcedurePriceRange(min=20000, max=80000, avg=40000),
                "pacemaker": ProcedurePriceRange(min=150000, max=500000, avg=250000),
            }
        ),
        MedicalCategory.ORTHOPEDIC.value: MappingProxyType(
            {
                "fixation": ProcedurePriceRange(min=50000, max=250000, avg=120000),
                "replacement": ProcedurePriceRange(min=150000, max=500000, avg=250000),
                "fusion": ProcedurePriceRange(min=200000, max=600000, avg=350000),
                "arthroscopy": ProcedurePriceRange(min=50000, max=200000, avg=100000),
            }
        ),
        GENERAL_PRICING_TABLE: MappingProxyType(
            {
                "icu charges": ProcedurePriceRange(min=10000, max=50000, avg=25000, unit="per day"),
                "ventilator": ProcedurePriceRange(min=5000, max=20000, avg=12000, unit="per day"),
                "operation theatre": ProcedurePriceRange(min=8000, max=30000, avg=15000),
                "anesthesia": ProcedurePriceRange(min=5000, max=25000, avg=12000),
                "blood tests": ProcedurePriceRange(min=2000, max=10000, avg=5000),
                "physiotherapy": ProcedurePriceRange(min=1000, max=5000, avg=2500, unit="per session"),
            }
        ),
    }
)

# Words that mark an amount as the bill total.
TOTAL_AMOUNT_KEYWORDS = (
    "total",
    "grand total",
    "net payable",
    "amount due",
    "final amount",
    "total estimated cost",
)

# =================================================================================
# == Hospital network reference data
# =================================================================================
KNOWN_NETWORK_HOSPITALS = (
    "apollo hospital", "apollo trauma hospital", "apollo hospitals",
    "fortis hospital", "fortis healthcare", "max hospital", "medanta",
    "aiims", "pgimer", "safdarjung hospital", "ram manohar lohia hospital",
    "gangaram hospital", "batra hospital", "holy family hospital",
)

HOSPITAL_CHAINS = ("apollo", "fortis", "max", "medanta", "narayana", "manipal", "columbia asia")

MAJOR_CITIES = (
    "mumbai", "delhi", "bangalore", "bengaluru", "chennai",
    "hyderabad", "pune", "kolkata", "ahmedabad",
)

HOSPITAL_NAME_PREFIXES = ("dr.", "dr ", "sri ", "shri ", "the ")

# Longest first so "medical center" wins over a bare trailing word.
HOSPITAL_NAME_SUFFIXES = (
    " private limited", " medical center", " medical centre", " nursing home",
    " healthcare", " hospitals", " hospital", " institute", " foundation",
    " pvt ltd", " limited", " clinic", " trust", " ltd",
)

HOSPITAL_ABBREVIATIONS = MappingProxyType(
    {
        "multispeciality": "multi specialty",
        "speciality": "specialty",
        "pvt": "private",
        "ltd": "limited",
        "&": "and",
        "hosp": "hospital",
        "med": "medical",
        "ctr": "center",
        "inst": "institute",
    }
)

# =================================================================================
# == Demo policy book
# =================================================================================
# Text fields are embedded into the policy fingerprints by the policy store.
POLICY_RULEBOOK = {
    "HDFC-OPT-2021": {
        "policy_name": "Optima Secure",
        "company_name": "HDFC ERGO",
        "sum_insured": 1000000.0,
        "is_active": False,
        "covered_conditions": (
            "Accidental injuries and emergency treatment. Surgical procedures including cardiac, "
            "neurological, orthopedic. Cancer treatment including chemotherapy and radiotherapy. "
            "Kidney dialysis and transplant procedures. Mental illness treatment (inpatient). "
            "Organ transplant procedures. Emergency ambulance charges."
        ),
        "excluded_conditions": (
            "Pre-existing conditions for first 3 years. Cosmetic and aesthetic treatments. "
            "Dental treatment unless due to accident. Self-inflicted injuries. "
            "Experimental treatments not approved by medical board."
        ),
        "network_hospitals": (
            "Apollo Hospitals, Fortis Healthcare Network, Max Healthcare Network, Manipal Hospitals, "
            "Narayana Health, Aster Medcity, Columbia Asia Hospitals, Yashoda Hospitals, Continental Hospitals"
        ),
        "pricing": (
            "Room rent up to 2% of sum insured per day. ICU charges up to 5% of sum insured per day. "
            "Deductible Rs. 5,000 per claim. Co-payment 10% for non-network hospitals."
        ),
    },
    "ICICI-CHI-2020": {
        "policy_name": "Complete Health Insurance",
        "company_name": "ICICI Lombard",
        "sum_insured": 1500000.0,
        "is_active": True,
        "covered_conditions": (
            "Heart diseases and cardiac procedures. Cancer treatment and oncology procedures. "
            "Neurological disorders and brain surgery. Kidney diseases and dialysis treatment. "
            "Orthopedic surgeries and joint replacements. Emergency treatments and accidents."
        ),
        "excluded_conditions": (
            "Infertility treatments and IVF procedures. Plastic surgery for cosmetic purposes. "
            "Dental treatments except accidental injuries. Alternative medicine treatments. "
            "Pre-existing diseases in first 4 years. Congenital diseases."
        ),
        "network_hospitals": (
            "All India Institute of Medical Sciences (AIIMS), Medanta - The Medicity, Artemis Hospitals, "
            "BLK Super Speciality Hospital, Sir Ganga Ram Hospital, Indraprastha Apollo Hospital, "
            "Fortis Escorts Hospital, Max Super Speciality Hospitals"
        ),
        "pricing": (
            "Room and board private AC room up to 2% of sum insured. Deductible Rs. 10,000 per policy year. "
            "Co-insurance 20% for treatments above Rs. 1,00,000."
        ),
    },
    "STAR-FHO-2022": {
        "policy_name": "Family Health Optima",
        "company_name": "Star Health",
        "sum_insured": 500000.0,
        "is_active": True,
        "covered_conditions": (
            "Hospitalisation for illness and accidents. Day care procedures. Road traffic accident "
            "treatment. Fractures and orthopedic surgery. Emergency ambulance."
        ),
        "excluded_conditions": (
            "Cosmetic surgery, obesity treatment, dental and vision care unless accidental, "
            "experimental and unproven treatments, pre-existing diseases in first 3 years."
        ),
        "network_hospitals": (
            "Apollo Hospitals, Manipal Hospitals, Narayana Health, Fortis Hospital, Kauvery Hospital"
        ),
        "pricing": "Room rent up to 1% of sum insured per day. Co-payment 20% for insured above 60 years.",
    },
}
