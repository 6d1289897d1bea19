"""Editable static menu configuration."""

from __future__ import annotations

# Display order of the item picker tabs.
CATEGORIES: list[dict[str, str]] = [
    {"id": "tradicionais", "name": "Lanches Tradicionais", "icon": "🍔"},
    {"id": "gourmet", "name": "Lanches Gourmet", "icon": "✨"},
    {"id": "hotdogs", "name": "Hot Dogs", "icon": "🌭"},
    {"id": "combos", "name": "Combos Mix", "icon": "🍟"},
    {"id": "portions", "name": "Porções de Batata", "icon": "🍟"},
    {"id": "drinks", "name": "Refrigerantes", "icon": "🥤"},
    {"id": "water", "name": "Água", "icon": "💧"},
    {"id": "beer", "name": "Cervejas", "icon": "🍺"},
    {"id": "acai", "name": "Açaí", "icon": "🍇"},
    {"id": "acai_extras", "name": "Adicionais Açaí", "icon": "➕"},
    {"id": "icecream", "name": "Sorvetes", "icon": "🍦"},
]

# A price of 0 marks a product as unavailable.
PRODUCTS: list[dict[str, object]] = [
    {"id": "tr1", "name": "Mix Burguer (Pão, hamb, queijo cheddar)", "price": 14.99, "category": "tradicionais"},
    {"id": "tr2", "name": "Mix Salada (Pão, hamb, queijo, presunto, milho, ervilha, pepino, palha, alface, tomate)", "price": 17.99, "category": "tradicionais"},
    {"id": "tr3", "name": "Mix Egg (Pão, hamb, queijo, presunto, ovo, milho, ervilha, pepino, alface, tomate)", "price": 19.99, "category": "tradicionais"},
    {"id": "tr4", "name": "Mix Frango (Pão, frango, queijo, milho, ervilha, pepino, palha, alface, tomate)", "price": 22.00, "category": "tradicionais"},
    {"id": "tr5", "name": "Mix Coração (Coração, queijo, milho, ervilha, palha, pepino, alface, tomate)", "price": 23.00, "category": "tradicionais"},
    {"id": "tr6", "name": "Mix Tudão (Hamb, ovo, frango, coração, bacon, calabresa, queijo, milho, ervilha, pepino, alface, tomate)", "price": 29.99, "category": "tradicionais"},
    {"id": "gm1", "name": "Mix Tasty (Hamb duplo, cheddar, molho especial, alface, tomate, pepino)", "price": 23.00, "category": "gourmet"},
    {"id": "gm2", "name": "Mix Bacon", "price": 0, "category": "gourmet"},
    {"id": "gm3", "name": "Mix Costela", "price": 0, "category": "gourmet"},
    {"id": "hd1", "name": "Mix Dog (Salsicha dupla, molho, milho, ervilha, vinagrete, palha)", "price": 13.00, "category": "hotdogs"},
    {"id": "hd2", "name": "Mix Dog Bacon (Salsicha dupla, molho, milho, ervilha, vinagrete, palha, queijo cheddar/catupiry)", "price": 15.00, "category": "hotdogs"},
    {"id": "cb1", "name": "Combo Mix Kids (Hamb queijo + Fritas 250g + Coca Mini)", "price": 16.00, "category": "combos"},
    {"id": "cb2", "name": "Combo Mix (Hamb queijo, molho, alface, tomate + Fritas 250g + Coca Mini)", "price": 19.99, "category": "combos"},
    {"id": "pt1", "name": "Batata Frita 500g", "price": 19.99, "category": "portions"},
    {"id": "pt2", "name": "Batata Frita 1kg", "price": 29.99, "category": "portions"},
    {"id": "pt_ad1", "name": "Adicional Cebolinha (Porção)", "price": 3.00, "category": "portions"},
    {"id": "pt_ad2", "name": "Adicional Queijo (Porção)", "price": 4.00, "category": "portions"},
    {"id": "pt_ad3", "name": "Adicional Bacon (Porção)", "price": 5.00, "category": "portions"},
    {"id": "pt_ad4", "name": "Adicional Cheddar (Porção)", "price": 5.00, "category": "portions"},
    {"id": "dr1", "name": "Coca Cola 2L", "price": 18.00, "category": "drinks"},
    {"id": "dr2", "name": "Garrafa KS 1L", "price": 9.00, "category": "drinks"},
    {"id": "dr3", "name": "Garrafa KS 350ml", "price": 0, "category": "drinks"},
    {"id": "dr4", "name": "Lata 350ml", "price": 6.00, "category": "drinks"},
    {"id": "dr5", "name": "Mini 200ml", "price": 3.00, "category": "drinks"},
    {"id": "wt1", "name": "Água com gás 500ml", "price": 3.00, "category": "water"},
    {"id": "wt2", "name": "Água sem gás 500ml", "price": 3.00, "category": "water"},
    {"id": "br1", "name": "Brahma 600ml", "price": 12.00, "category": "beer"},
    {"id": "br2", "name": "Heineken 600ml", "price": 12.00, "category": "beer"},
    {"id": "br3", "name": "Amstel 600ml", "price": 12.00, "category": "beer"},
    {"id": "br4", "name": "Heineken Long Neck", "price": 0, "category": "beer"},
    {"id": "br5", "name": "Corona Long Neck", "price": 0, "category": "beer"},
    {"id": "ac1", "name": "Açaí 300ml (Granola, Morango ou Banana)", "price": 9.99, "category": "acai"},
    {"id": "ac2", "name": "Açaí 500ml (Granola, Morango ou Banana)", "price": 15.99, "category": "acai"},
    {"id": "acad1", "name": "Adicional Leite em Pó", "price": 4.00, "category": "acai_extras"},
    {"id": "acad2", "name": "Adicional Leite Condensado", "price": 4.00, "category": "acai_extras"},
    {"id": "acad3", "name": "Adicional Creme de Avelã", "price": 4.00, "category": "acai_extras"},
    {"id": "acad4", "name": "Adicional Confete", "price": 4.00, "category": "acai_extras"},
    {"id": "acad5", "name": "Adicional Paçoca", "price": 4.00, "category": "acai_extras"},
    {"id": "acad6", "name": "Adicional Kiwi", "price": 4.00, "category": "acai_extras"},
    {"id": "ic1", "name": "Sorvete Casquinha", "price": 4.99, "category": "icecream"},
    {"id": "ic2", "name": "Sorvete Cascão", "price": 7.99, "category": "icecream"},
]
