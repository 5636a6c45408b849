"""Systems built from type-hinted functions, with resources, access checks, event queues and an entity world."""