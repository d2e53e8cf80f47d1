"""Codes the chart engine references, used to seed an empty catalog."""

CATALOG_CODES = [
    {"code": "A10", "description": "Geleidings-, infiltratie- en/of intraligamentaire verdoving", "category": "ANESTHESIA"},
    {"code": "C022", "description": "Droogleggen van elementen door middel van een rubberen lapje", "category": "CONSULTATION"},

    {"code": "V71", "description": "Eénvlaksvulling amalgaam", "category": "FILLINGS"},
    {"code": "V72", "description": "Tweevlaksvulling amalgaam", "category": "FILLINGS"},
    {"code": "V73", "description": "Drievlaksvulling amalgaam", "category": "FILLINGS"},
    {"code": "V74", "description": "Meervlaksvulling amalgaam", "category": "FILLINGS"},
    {"code": "V81", "description": "Eénvlaksvulling glasionomeer/glascarbomeer/compomeer", "category": "FILLINGS"},
    {"code": "V82", "description": "Tweevlaksvulling glasionomeer/glascarbomeer/compomeer", "category": "FILLINGS"},
    {"code": "V83", "description": "Drievlaksvulling glasionomeer/glascarbomeer/compomeer", "category": "FILLINGS"},
    {"code": "V84", "description": "Meervlaksvulling glasionomeer/glascarbomeer/compomeer", "category": "FILLINGS"},
    {"code": "V91", "description": "Eénvlaksvulling composiet", "category": "FILLINGS"},
    {"code": "V92", "description": "Tweevlaksvulling composiet", "category": "FILLINGS"},
    {"code": "V93", "description": "Drievlaksvulling composiet", "category": "FILLINGS"},
    {"code": "V94", "description": "Meervlaksvulling composiet", "category": "FILLINGS"},
    {"code": "V30", "description": "Fissuurlak eerste element", "category": "PREVENTIVE"},
    {"code": "V35", "description": "Fissuurlak volgende element in dezelfde zitting", "category": "PREVENTIVE"},

    {"code": "R14", "description": "Toeslag voor extra retentie bij het plaatsen van indirecte restauraties", "category": "CROWNS_BRIDGES"},
    {"code": "R24", "description": "Kroon op natuurlijk element", "category": "CROWNS_BRIDGES"},
    {"code": "R34", "description": "Kroon op natuurlijk element, goud", "category": "CROWNS_BRIDGES"},
    {"code": "R40", "description": "Eerste brugtussendeel", "category": "CROWNS_BRIDGES"},
    {"code": "R45", "description": "Toeslag bij een conventionele brug voor elk volgende brugtussendeel in hetzelfde tussendeel", "category": "CROWNS_BRIDGES"},
    {"code": "R49", "description": "Toeslag voor brug op vijf- of meer pijlerelementen", "category": "CROWNS_BRIDGES"},

    {"code": "H11", "description": "Trekken tand of kies", "category": "SURGERY"},
    {"code": "H21", "description": "Kosten hechtmateriaal", "category": "SURGERY"},
    {"code": "H26", "description": "Hechten weke delen", "category": "SURGERY"},
    {"code": "H33", "description": "Hemisectie van een molaar", "category": "SURGERY"},
    {"code": "H34", "description": "Vrijleggen ingesloten tand of kies ter bevordering van de doorbraak", "category": "SURGERY"},
    {"code": "H35", "description": "Moeizaam trekken tand of kies met behulp van chirurgie", "category": "SURGERY"},

    {"code": "T021", "description": "Complex root cleaning", "category": "PERIODONTOLOGY"},
    {"code": "T022", "description": "Standard root cleaning", "category": "PERIODONTOLOGY"},

    {"code": "DISABLED", "description": "Element niet aanwezig", "category": "SYSTEM"},
    {"code": "SAVED_DENTAL_CHART", "description": "Opgeslagen status", "category": "SYSTEM"},
]
