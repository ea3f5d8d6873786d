"""User-facing messages shown by the onboarding wizard (pt-BR)."""

OWNER_NAME_REQUIRED = "Nome é obrigatório"
OWNER_PHONE_REQUIRED = "Telefone é obrigatório"
OWNER_FIELDS_TITLE = "Campos obrigatórios"
OWNER_FIELDS_DESCRIPTION = "Nome e telefone da família são obrigatórios"

PET_NAME_REQUIRED = "Nome é obrigatório"
PET_SPECIES_REQUIRED = "Selecione uma espécie"
PET_SIZE_REQUIRED = "Selecione o porte"
PET_FIELDS_TITLE = "Campos obrigatórios faltando"
PET_FIELDS_DESCRIPTION = "Preencha nome, espécie e porte do pet"
PET_ADDED_TITLE = "Pet adicionado! 🐾"
PET_ADDED_DESCRIPTION = "{name} foi adicionado à família"

NO_PETS_TITLE = "Adicione pelo menos um pet"
NO_PETS_DESCRIPTION = "Uma família precisa ter pelo menos um amiguinho 🐾"

FAMILY_CREATED_TITLE = "Família cadastrada com sucesso! 🎉"
FAMILY_CREATED_DESCRIPTION = "{owner} e {count} pets foram cadastrados"

SUBMISSION_FAILED_TITLE = "Erro ao cadastrar família"
SUBMISSION_FAILED_DESCRIPTION = "Algo deu errado. Tente novamente."
