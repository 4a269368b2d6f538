# =============================================================================
# Reference Data — Wizard Option Lists & Appeal-Type Guidance
# =============================================================================
#
# Static label lists shown as checkboxes in the wizard. The selected labels
# are copied verbatim into the case summary, so the wording here is what the
# model ultimately reads. Keep labels in the first person, past tense for
# corrective actions and present tense for preventive measures.
#
# Option resolution (which lists a given appeal type sees) lives at the
# bottom: root_causes_for(), corrective_actions_for(),
# preventive_measure_groups_for().
# =============================================================================

from __future__ import annotations

# ---------------------------------------------------------------------------
# Appeal Types
# ---------------------------------------------------------------------------

APPEAL_TYPES: list[dict[str, str]] = [
    {
        "value": "inauthenticity-supply-chain",
        "label": "Seller Account Suspension: Inauthenticity / Supply Chain (includes Retail Arbitrage)",
    },
    {
        "value": "intellectual-property",
        "label": "Seller Account Suspension: Intellectual Property (IP) Violation (Copyright, Trademark, Patent)",
    },
    {
        "value": "seller-code-conduct",
        "label": "Seller Account Suspension: Seller Code of Conduct (includes Review Manipulation, Forged Docs)",
    },
    {
        "value": "related-account",
        "label": "Seller Account Suspension: Related Account Suspension (includes Multiple Accounts)",
    },
    {
        "value": "drop-shipping",
        "label": "Seller Account Suspension: Drop-Shipping Policy Violation",
    },
    {
        "value": "restricted-products",
        "label": "Seller Account Suspension: Restricted Products Policy Violation (includes supplements making improper claims)",
    },
    {
        "value": "used-sold-as-new",
        "label": 'Seller Account Suspension: "Used Sold as New" / Condition Complaints / High ODR',
    },
    {
        "value": "high-cancellation",
        "label": "Seller Account Suspension: High Cancellation Rate / Sales Velocity",
    },
    {
        "value": "marketplace-pricing",
        "label": "Seller Account Suspension: Marketplace Fair Pricing Violation",
    },
    {
        "value": "verification-failure",
        "label": "Seller Account Suspension: Account Deactivation - Verification Failure (Utility Bill, ID, documentation)",
    },
    {
        "value": "account-compromised",
        "label": "Seller Account Suspension: Account Compromised / Hacked",
    },
    {
        "value": "deceptive-activity",
        "label": "Seller Account Suspension: Deceptive, Fraudulent, or Illegal Activity",
    },
    {
        "value": "detail-page-abuse",
        "label": "Listing Suspension/Category Issue: Detail Page Abuse (e.g., Title/Bullet Point Tampering)",
    },
    {
        "value": "category-approval",
        "label": "Listing Suspension/Category Issue: Product Group / Category Approval (e.g., Toys, CPC)",
    },
    {
        "value": "kdp-acx-merch",
        "label": "ACX / KDP Termination: Content Guideline Violation (e.g., IP, Misleading Title)",
    },
    {
        "value": "fba-shipping",
        "label": "FBA Shipping: FBA Shipping Violation (e.g., 2D Barcode)",
    },
    {
        "value": "amazon-relay",
        "label": "Amazon Relay Account: Amazon Relay Account Suspension (e.g., Subcontracting)",
    },
    {
        "value": "brand-registry",
        "label": "Brand Registry: Brand Registry Issue / Error",
    },
    {
        "value": "safety-suspension",
        "label": "Amazon Safety Suspension Appeals",
    },
    {
        "value": "variation-abuse",
        "label": "Amazon Variation Abuse Appeals",
    },
    {
        "value": "merch-termination",
        "label": "Merch by Amazon (MBA) Account Termination",
    },
    {
        "value": "other",
        "label": "Other",
    },
]

APPEAL_TYPE_VALUES = frozenset(t["value"] for t in APPEAL_TYPES)

# Appeal types written from a publisher's point of view (author, titles,
# catalog) rather than a seller's (store, inventory, listings).
PUBLISHING_APPEAL_TYPES = frozenset({"kdp-acx-merch", "merch-termination"})


def appeal_type_label(value: str) -> str:
    """Human-readable label for an appeal type; unknown values pass through."""
    for option in APPEAL_TYPES:
        if option["value"] == value:
            return option["label"]
    return value


# ---------------------------------------------------------------------------
# Root Causes (per appeal type)
# ---------------------------------------------------------------------------

ROOT_CAUSES: dict[str, list[str]] = {
    "inauthenticity-supply-chain": [
        "I was operating a Retail Arbitrage model (e.g., sourcing from TJMaxx, Marshalls) without brand authorization",
        "I was unable to provide sufficient supply chain documentation (e.g., valid invoices, LOA)",
        "My invoices were retail receipts or order confirmations (e.g., from Walmart)",
        "I failed to verify if my supplier was an authorized distributor",
        "I joined an existing listing without the right to resell the brand",
        "A customer ordered the wrong part and believed it was inauthentic or used",
    ],
    "seller-code-conduct": [
        "Used product inserts or packaging stickers to offer free products/rewards for reviews",
        "Offered customers refunds or gift cards to remove negative feedback",
        "Contacted customers to ask them to cancel orders (to avoid stock-outs)",
        "Used a third-party service to request or manipulate feedback (e.g., Feedback Genius)",
        "Asked friends or family to buy or review my product",
        "Used deep discounts (below cost) to manipulate sales rank",
        "Submitted forged or altered documents (e.g., modified a COA date)",
        "Created or operated more than one seller account",
    ],
    "used-sold-as-new": [
        "Item was used and not new",
        "Item was not as described in the listing",
        "Book had highlighting or writing inside",
        "Package was missing components (e.g., origami papers, lancet)",
    ],
    "restricted-products": [
        "An automated keyword mismatch flagged my product in error",
        "The listing title was inconsistent with the actual product ingredients",
        "Amazon misidentified my product as containing a restricted ingredient (e.g., Minoxidil)",
        "My listing made prohibited disease claims (e.g., 'anti-inflammatory')",
        "My subtitle or cover made unapproved medical or health claims",
    ],
    "intellectual-property": [
        "The complaint is for a foreign patent/trademark not enforceable in this marketplace (e.g., EU patent in US)",
        "The complaint is false; I am an authorized reseller with valid invoices/LOA",
        "The complaint was fraudulent, filed by an unauthorized person",
        "My content was original, and the rights owner copied me",
        "I used trademarked terms (e.g., 'Harry Potter', 'NASA', 'TWITTER') in my titles, descriptions, or tags",
        "My listing's text or images infringed on another's copyright",
        "I had a poor understanding of IP policies and failed to research trademarks (e.g., in USPTO)",
    ],
    "verification-failure": [
        "The utility bill was not in my name (e.g., it was in a tenant's or landlord's name)",
        "The address on my documents did not match the address in Seller Central",
        "My documents were expired or in an unsupported format",
        "I did not have the requested document (e.g., business license)",
        "Other (please explain)",
    ],
    "detail-page-abuse": [
        "Title (e.g., too long, not compliant with Style Guide)",
        "Bullet Points (e.g., added symbols, brackets, or marketing text)",
        "Images (e.g., not original, non-compliant)",
        "Used false product identification (e.g., UPCs)",
        "Created a duplicate product detail page",
        "Used an existing listing for a new version of a product",
    ],
    "category-approval": [
        "Children's Product Certificate (CPC)",
        "CPSC-accepted lab test report (e.g., SGS report)",
        "Invoices from supplier",
        "Product & Packaging Photos",
    ],
}


# ---------------------------------------------------------------------------
# Corrective Actions (general + per-type groups)
# ---------------------------------------------------------------------------

BUSINESS_SOLUTIONS_AGREEMENT_ACTION = (
    "I have reviewed Amazon's Business Solutions Agreement and selling policies"
)

CORRECTIVE_ACTIONS: dict[str, list[str]] = {
    "general": [
        "I have permanently deleted the flagged ASINs from my inventory and listings",
        "I have resolved the issue with the complaining customer (e.g., processed a full refund)",
        "I have conducted a complete audit of all my active and inactive listings",
        "I have carefully read and reviewed all relevant Amazon policies",
        "I have retrained my team on Amazon's policies and listing accuracy",
        BUSINESS_SOLUTIONS_AGREEMENT_ACTION,
    ],
    "inauthenticity": [
        "I have ceased sourcing from the unverified/retail supplier (e.g., Walmart, TJMaxx)",
        "I have provided invoices or retail receipts to verify the source of the products",
        "I have retained legal counsel to contact the rights owner",
        "I have submitted a valid Letter of Authorization (LOA) from my supplier",
    ],
    "intellectual_property": [
        "I have hired an attorney who has contacted the rights owner for a retraction",
        "I have filed a DMCA counter-notice (for false complaints)",
        "I have sanitized all my listings to remove any infringing intellectual property",
        "I will remove the specific infringing component from future products",
    ],
    "code_of_conduct": [
        "I have recalled FBA inventory to remove non-compliant stickers/inserts",
        "I have disabled the external promotional website/landing page",
        "I have attached a list of Order IDs for the prohibited reviews",
        "I have canceled my subscription to all third-party feedback services",
        "I have asked my friends and family to remove their reviews",
        "I have terminated the employee responsible for submitting altered documents",
    ],
    "restricted_products": [
        'I have "sanitized" my listings to remove all prohibited disease claims',
        "I have attached new, compliant product images",
        "I have attached a valid Certificate of Analysis (COA) or supplier certifications",
    ],
    "verification_failure": [
        "I have obtained a new, valid utility bill in my name",
        "I have submitted the new, valid utility bill and/or bank statement",
        "I have verified there is a valid credit card on file",
    ],
    "related_account": [
        "I have identified the account I am related to",
        "I have successfully appealed and reinstated the other account",
        "I have requested the permanent closure of the related account",
    ],
    "detail_page_abuse": [
        "I have edited the title to be compliant (e.g., shortened to < 50 chars)",
        "I have removed all symbols (hyphens, brackets) from my bullet points",
        "I have replaced all non-compliant images with my own original photos",
    ],
    "category_approval": [
        "I have submitted a valid Children's Product Certificate (CPC)",
        "I have submitted a valid test report from a CPSC-accepted lab (e.g., SGS)",
        "I have submitted product and packaging photos",
    ],
    "kdp_acx_merch": [
        "I have reviewed KDP's Terms of Service and Content Guidelines",
    ],
    "relay": [
        "I have reviewed Amazon Relay's Conditions of Use",
    ],
    "merch": [
        "I have reviewed Amazon Merch on Demand Services Agreement and the Terms of Use",
    ],
}

# Appeal type → type-specific corrective-action group
_CORRECTIVE_GROUP_BY_TYPE = {
    "intellectual-property": "intellectual_property",
    "seller-code-conduct": "code_of_conduct",
    "restricted-products": "restricted_products",
    "verification-failure": "verification_failure",
    "related-account": "related_account",
    "detail-page-abuse": "detail_page_abuse",
    "category-approval": "category_approval",
    "kdp-acx-merch": "kdp_acx_merch",
    "amazon-relay": "relay",
    "merch-termination": "merch",
}

# Platforms that are not governed by the Business Solutions Agreement
_NO_BSA_TYPES = frozenset({"kdp-acx-merch", "amazon-relay"})


# ---------------------------------------------------------------------------
# Preventive Measures (seller groups + publishing groups)
# ---------------------------------------------------------------------------

PREVENTIVE_MEASURES: dict[str, list[str]] = {
    "sourcing": [
        "I source products only from reputable wholesalers or verified distributors who provide proper documentation",
        "I no longer use a Retail Arbitrage model",
        "I conduct detailed background checks on new suppliers",
        "I request Proforma Invoices to verify company details to vet suppliers",
        "I conduct test buys of new products from potential suppliers",
        "I visit the supplier/manufacturer in person (if local)",
        "Before sourcing, I contact brand owners directly to obtain a Letter of Authorization (LOA)",
        "Before sourcing, I contact Seller Support",
        "I keep all invoices and supply chain documentation for all products",
    ],
    "listing": [
        "I have appointed a compliance manager/QC supervisor to review all listings before publication",
        "Management approval is required for all new detail pages",
        "I check the USPTO and US Copyright Office databases before listing to prevent IP violations",
        "I research keywords on Amazon to see if they are part of a trademarked phrase",
        "I only use original photos taken by me, not manufacturer/supplier photos",
        "I do not add symbols, marketing text, or non-compliant information to titles or bullet points",
        "I do not use false product identification (e.g., UPCs) or create duplicate detail pages",
        "I do not use an old listing for a new version of a product; I will create a new ASIN",
        "I do not use ingredient names in titles unless they are in the product",
        "I get FDA 510k approval or verify exemption before listing any product that makes medical claims",
        "I add all appropriate CPSC/safety cautionary advisements to my listing",
        "I have implemented a supplier safety testing review program",
        "If in doubt, I consult an Intellectual Property lawyer before listing",
    ],
    "review_manipulation": [
        "I do not use any product inserts, stickers, or packaging to request reviews or offer rewards",
        "I rely only on Amazon's internal \"Request a Review\" button and Vine program",
        "I do not purchase my own products or ask friends/family to purchase or review my products",
        "I do not use deep discounts (below cost) to manipulate sales rank",
        "I do not use any third-party service to stimulate sales, rank, or reviews",
        "I implement a weekly and monthly training program for all staff on review policies",
    ],
    "operations": [
        "I conduct regular physical inventory checks to ensure my stock levels are accurate",
        "I convert my fulfillment model to FBA",
        "I spot-check incoming inventory lots for condition, quality, and completeness",
        "I have appointed a compliance officer to monitor policy changes monthly",
        "I perform bi-weekly checks of my account health and live listings",
        "I monitor all customer feedback, complaints, and reviews to proactively identify issues",
        "Any product that creates a poor customer experience is immediately withdrawn from inventory",
        "I respond to all customer inquiries in less than 24 hours",
    ],
}

PUBLISHING_PREVENTIVE_MEASURES: dict[str, list[str]] = {
    "content_copyright": [
        "I verify copyright ownership or obtain proper licenses for all published content",
        "I conduct plagiarism checks using professional tools (Copyscape, PlagScan, Grammarly Premium) before publishing",
        "I ensure all content is original or properly licensed with documentation",
        "I maintain records of all copyright permissions and licenses",
        "I do not use copyrighted content, quotes, or excerpts without proper attribution and permission",
        "I have implemented a content review process to verify originality before publication",
    ],
    "cover_design": [
        "I only use original artwork or properly licensed images for book covers",
        "I verify image licensing and maintain documentation for all cover design elements",
        "I do not use celebrity images, trademarked characters, or copyrighted artwork without authorization",
        "I conduct reverse image searches to ensure cover images are not infringing",
        "I maintain licenses for stock photos and design elements used in covers",
        "I verify that cover designers provide proof of licensing for all assets",
    ],
    "title_metadata": [
        "I do not use trademarked terms, brand names, or series titles in my book titles without authorization",
        "I review all keywords and metadata to ensure they don't infringe on trademarks",
        "I verify that book titles and subtitles comply with Amazon's content policy",
        "I check USPTO database before using potentially trademarked phrases in titles",
        "I ensure book descriptions accurately represent content without misleading claims",
        "I avoid using celebrity names or popular series titles without proper authorization",
    ],
    "content_quality": [
        "I ensure all published content meets Amazon's content quality guidelines",
        "I implement editorial review processes to maintain content standards",
        "I do not publish public domain works without substantial unique content or value-add",
        "I verify age-appropriateness of content and apply correct content ratings",
        "I maintain professional editing and proofreading standards for all publications",
        "I ensure translations are accurate and properly attributed when publishing translated works",
    ],
    "author_verification": [
        "I maintain proper documentation of authorship and publishing rights",
        "I verify contributor information and obtain necessary permissions",
        "I do not publish under false identities or misrepresent authorship",
        "I maintain clear agreements with co-authors, ghostwriters, or content contributors",
        "I verify that all contributors have rights to their contributions",
        "I maintain records demonstrating my authority to publish all content",
    ],
}

SELLER_PREVENTIVE_CATEGORIES = [
    ("Sourcing & Supplier Vetting", "sourcing"),
    ("Listing, IP & Detail Page Integrity", "listing"),
    ("Review & Sales Rank Compliance", "review_manipulation"),
    ("Operations & Monitoring", "operations"),
]

PUBLISHING_PREVENTIVE_CATEGORIES = [
    ("Content & Copyright", "content_copyright"),
    ("Cover Design", "cover_design"),
    ("Title & Metadata", "title_metadata"),
    ("Content Quality", "content_quality"),
    ("Author Verification", "author_verification"),
]


# ---------------------------------------------------------------------------
# Supporting Document Types
# ---------------------------------------------------------------------------

SUPPORTING_DOCUMENT_TYPES: list[dict[str, str]] = [
    {"value": "utility-bill", "label": "Utility Bill (e.g., gas bill)", "category": "Identity & Address"},
    {"value": "government-id", "label": "Government-issued ID", "category": "Identity & Address"},
    {"value": "bank-statement", "label": "Bank Statement", "category": "Identity & Address"},
    {"value": "certificate-of-formation", "label": "Certificate of Formation/Incorporation", "category": "Business"},
    {"value": "invoice", "label": "Invoices or Order Confirmations", "category": "Supply Chain"},
    {"value": "loa", "label": "Letter of Authorization (LOA)", "category": "Supply Chain"},
    {"value": "retail-receipt", "label": "Retail Receipts", "category": "Supply Chain (Retail Arbitrage)"},
    {"value": "trademark-proof", "label": "Proof of Trademark Registration", "category": "Intellectual Property"},
    {"value": "dmca-counter-notice", "label": "DMCA Counter-Notice", "category": "Intellectual Property"},
    {"value": "product-label", "label": "Product Labels / Packaging Photos", "category": "Restricted Products / Safety"},
    {"value": "coa", "label": "Certificate of Analysis (COA)", "category": "Restricted Products / Safety"},
    {"value": "gmp-certificate", "label": "Good Manufacturing Practices (GMP) Certificate", "category": "Restricted Products / Safety"},
    {"value": "cpc", "label": "Children's Product Certificate (CPC)", "category": "Restricted Products / Safety"},
    {"value": "lab-test-report", "label": "CPSC-accepted Lab Test Report", "category": "Restricted Products / Safety"},
    {"value": "product-insert-photo", "label": "Photos of Product Inserts/Stickers", "category": "Review Manipulation"},
    {"value": "order-id-list", "label": "List of Order IDs", "category": "Review Manipulation"},
    {"value": "relay-documents", "label": "Amazon Relay Documents (Bill of Sale, Registration, etc.)", "category": "Amazon Relay"},
    {"value": "other", "label": "Other Supporting Document", "category": "General"},
]


# ---------------------------------------------------------------------------
# Appeal-Type Guidance
# ---------------------------------------------------------------------------
# One "Focus on:" line per type, placed near the top of the case summary so
# both the embedding and the model see the category's priorities early.
# ---------------------------------------------------------------------------

APPEAL_TYPE_GUIDANCE: dict[str, str] = {
    "inauthenticity-supply-chain": (
        "Focus on: Supply chain documentation (invoices, LOA), authorized distributor "
        "verification, retail arbitrage issues. Often requires detailed supplier "
        "information and proof of authenticity."
    ),
    "intellectual-property": (
        "Focus on: Trademark/copyright/patent details, USPTO verification, authorized "
        "reseller proof, retraction requests, DMCA counter-notices. May need attorney "
        "involvement."
    ),
    "seller-code-conduct": (
        "Focus on: Review manipulation, multiple accounts, forged documents. Requires "
        "detailed acknowledgment of policy violations and concrete preventive systems."
    ),
    "related-account": (
        "Focus on: Related account identification, explanation of relationship, "
        "closure or reinstatement of related account."
    ),
    "drop-shipping": (
        "Focus on: Fulfillment model changes, inventory management, shipping "
        "compliance, supplier documentation."
    ),
    "restricted-products": (
        "Focus on: Product compliance, certifications (COA, GMP), disease claims "
        "removal, ingredient verification, regulatory approvals."
    ),
    "used-sold-as-new": (
        "Focus on: Product condition, quality control, sourcing verification, "
        "customer experience improvements."
    ),
    "high-cancellation": (
        "Focus on: Inventory management, fulfillment processes, order fulfillment "
        "rates, sales velocity controls."
    ),
    "marketplace-pricing": (
        "Focus on: Pricing strategies, fair market value, pricing errors correction, "
        "automated pricing tool issues."
    ),
    "verification-failure": (
        "Focus on: Document verification (utility bill, ID, bank statement), address "
        "matching, document validity."
    ),
    "account-compromised": (
        "Focus on: Account security, unauthorized access, password changes, security "
        "measures implementation."
    ),
    "deceptive-activity": (
        "Focus on: Business practices review, legal compliance, fraud prevention measures."
    ),
    "detail-page-abuse": (
        "Focus on: Listing compliance (title, bullets, images), style guide adherence, "
        "UPC validity."
    ),
    "category-approval": (
        "Focus on: Category requirements (CPC, lab reports), product certifications, "
        "safety documentation."
    ),
    "kdp-acx-merch": (
        "Focus on: Content guidelines, IP compliance, misleading content removal, "
        "publishing platform policies."
    ),
    "fba-shipping": (
        "Focus on: FBA requirements, barcode compliance, packaging standards, "
        "shipping violations."
    ),
    "amazon-relay": (
        "Focus on: Relay-specific policies, subcontracting issues, driver compliance."
    ),
    "brand-registry": (
        "Focus on: Brand verification, trademark issues, brand registry requirements."
    ),
}

DEFAULT_GUIDANCE = (
    "Focus on: Comprehensive understanding of the violation, specific corrective "
    "actions, and robust preventive measures."
)


# ---------------------------------------------------------------------------
# Option Resolution
# ---------------------------------------------------------------------------


def guidance_for(appeal_type: str) -> str:
    return APPEAL_TYPE_GUIDANCE.get(appeal_type, DEFAULT_GUIDANCE)


def is_publishing_type(appeal_type: str) -> bool:
    return appeal_type in PUBLISHING_APPEAL_TYPES


def root_causes_for(appeal_type: str) -> list[str]:
    """The type's root-cause checkboxes, or an empty list."""
    return list(ROOT_CAUSES.get(appeal_type, []))


def corrective_actions_for(appeal_type: str) -> list[str]:
    """
    General corrective actions followed by the type's own group.

    KDP/ACX/Merch and Relay accounts are not covered by the Business
    Solutions Agreement, so that item is dropped for them.
    """
    actions = list(CORRECTIVE_ACTIONS["general"])
    if appeal_type in _NO_BSA_TYPES:
        actions.remove(BUSINESS_SOLUTIONS_AGREEMENT_ACTION)

    if "inauthenticity" in appeal_type or "supply-chain" in appeal_type:
        actions.extend(CORRECTIVE_ACTIONS["inauthenticity"])

    group = _CORRECTIVE_GROUP_BY_TYPE.get(appeal_type)
    if group:
        actions.extend(CORRECTIVE_ACTIONS[group])
    return actions


def preventive_measure_groups_for(appeal_type: str) -> list[dict]:
    """
    Preventive-measure checkbox groups as [{"category": ..., "items": [...]}].

    Publishing types get the publishing groups in place of the seller groups.
    """
    if is_publishing_type(appeal_type):
        categories, source = PUBLISHING_PREVENTIVE_CATEGORIES, PUBLISHING_PREVENTIVE_MEASURES
    else:
        categories, source = SELLER_PREVENTIVE_CATEGORIES, PREVENTIVE_MEASURES

    return [
        {"category": label, "items": list(source[key])}
        for label, key in categories
    ]
